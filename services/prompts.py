"""Prompt templates. Placeholders use ``{{name}}`` and are filled by LLMClient.infer."""

HEADER_MAPPING_PROMPT_NAME = "header_mapping_v1"
HEADER_MAPPING_PROMPT = """
You are a data analyst. A user uploaded a spreadsheet with the following headers.
Identify which header most likely corresponds to the "Person's Full Name", which one to
the "Company Name or Domain", and which one (if any) holds the person's email address.

Headers: {{headers}}

Return a JSON object with the keys "nameHeader", "companyHeader" and "emailHeader".
Copy header values exactly as listed. Use null for "emailHeader" when no header holds emails.
If you are unsure, pick the most likely ones.
"""

PEOPLE_EXTRACTION_PROMPT_NAME = "people_extraction_v1"
PEOPLE_EXTRACTION_PROMPT = """
You are an expert data extracting agent.
I will provide you with the text content of an event website or a page containing participant information.
Your goal is to extract a list of "Speakers", "Attendees", "Participants", or "Key People" from the page.

For each person, extract:
- Full Name
- Job Title / Role (e.g., CEO, Founder, Senior Engineer)
- Company / Organization

Guidelines:
1. If the company or role is not explicitly listed next to the name, try to infer it from context if possible, or use "Unknown".
2. Ignore generic names like "TBA", "Moderator", or "Speaker".
3. Ensure every entry has a name and a company.

Return a JSON object with a key "speakers" which is an array of objects with "name", "company" and "role".

Page content:
{{content}}
"""

SYSTEM_PROMPT = "You are a precise analyst. Output only valid JSON matching the requested schema."
