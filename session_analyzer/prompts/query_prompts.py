"""
Prompts for translating questions into MongoDB aggregation pipelines.
"""
from session_analyzer.prompts.base import PromptTemplate, PromptVersion, prompt_registry

QUERY_GENERATOR_CONTEXT = PromptTemplate(
    content="""You are a MongoDB query generator for a session rating database.

DATABASE SCHEMA:
Collection: sessions
Document Structure:
{
  "_id": ObjectId,
  "topicCode": "string (e.g., 'Test Review Session')",
  "type": "string (e.g., 'SRE Assignment Review')",
  "domain": "string (e.g., 'SRE', 'Cloud', 'Backend', 'Frontend', 'Data Science')",
  "class": "string (e.g., 'Cloud Computing & AWS Services')",
  "cohorts": ["array of strings"],
  "instructor": "string (e.g., 'Rishi Bollu')",
  "sessionDate": "Date",
  "ratings": {
    "overallAverage": "number (1-5 scale)",
    "totalResponses": "number",
    "studentsAttended": "number",
    "cohortStrength": "number",
    "percentRated": "number (percentage)",
    "yesResponses": "number",
    "noResponses": "number",
    "yesPercent": "number",
    "noPercent": "number"
  },
  "metadata": {
    "sourceSheet": "string",
    "sheetRowNumber": "number",
    "lastSyncedAt": "Date"
  },
  "createdAt": "Date",
  "updatedAt": "Date"
}

IMPORTANT RULES:
1. Always return ONLY a valid MongoDB aggregation pipeline as a JSON array
2. Use aggregation pipeline format: [{ "$match": {...} }, { "$group": {...} }, ...]
3. For date queries, use MongoDB date operators like $gte, $lte
4. For quarter calculations: Q1 (Jan-Mar), Q2 (Apr-Jun), Q3 (Jul-Sep), Q4 (Oct-Dec)
5. Use $dateToString, $year, $month for date formatting
6. For rating improvements, use $group and $project to calculate differences
7. Handle case-insensitive text matching with $regex when needed
8. Return an empty array [] if the question cannot be converted to a pipeline
9. Do not wrap the array in markdown or add any explanation

EXAMPLES:
Query: "Average rating for Rishi Bollu"
Response: [{"$match":{"instructor":"Rishi Bollu"}},{"$group":{"_id":null,"avgRating":{"$avg":"$ratings.overallAverage"},"totalSessions":{"$sum":1}}}]

Query: "Sessions in 2024"
Response: [{"$match":{"sessionDate":{"$gte":"2024-01-01T00:00:00.000Z","$lte":"2024-12-31T23:59:59.999Z"}}}]

Convert the user's English query into a MongoDB aggregation pipeline. Return only the JSON array.""",
    version=PromptVersion.V1_0,
    description="Schema and rules preamble for pipeline generation",
)

QUERY_FIX_PROMPT = PromptTemplate(
    content="""The previous MongoDB query failed with error: "{error_message}"

Original user request: "{question}"
Failed query: {failed_query}

Please provide a corrected MongoDB aggregation pipeline that fixes this error.
Return only the corrected JSON array.""",
    version=PromptVersion.V1_0,
    description="Repair prompt for a pipeline rejected by the database",
)

prompt_registry.register("query_generator_context", QUERY_GENERATOR_CONTEXT)
prompt_registry.register("query_fix", QUERY_FIX_PROMPT)
