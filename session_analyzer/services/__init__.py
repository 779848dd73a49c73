"""
Services module for the session analyzer.

Contains the request-level query pipeline, the component container
and the AWS Secrets Manager integration used by configuration.
"""
