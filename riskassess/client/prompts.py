"""Prompt sent to the AI completion service for a risk assessment."""

RISK_PROMPT_TEMPLATE = """Analyze the following project: "{project_idea}".

1) Identify the key risks that could be encountered.
2) Evaluate their likelihood and potential impact using a scoring system from 1 (lowest) to 5 (highest).
3) Offer actionable mitigation strategies to safeguard the project.

Provide the response in the following JSON format:

{{
  "risks": [
    {{
      "risk": "Description of the risk",
      "likelihood": number from 1 to 5,
      "impact": number from 1 to 5,
      "mitigation": "Mitigation strategy"
    }},
    // ... more risks
  ]
}}"""


def build_risk_prompt(project_idea: str) -> str:
    return RISK_PROMPT_TEMPLATE.format(project_idea=project_idea)
