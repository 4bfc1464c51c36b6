"""
Prompt for AI priority assessment.
"""

from civic_pulse.models.issue import IssueContext

SYSTEM_INSTRUCTION = "You are an expert civic issue triage AI. Respond only with valid JSON."


def build_priority_prompt(context: IssueContext) -> str:
    """Build the fixed triage prompt for one issue."""
    return f"""You are an expert civic issue triage system. Analyze this civic issue report and determine its priority level.

**Issue Details:**
- Category: {context.category}
- Title: {context.title}
- Description: {context.description}
- Similar issues in area: {context.similar_issues_count}
- Photos attached: {len(context.photo_references)}

**Priority Levels:**
- Critical (85-100): Immediate safety threats, life-threatening situations, major infrastructure failures
- High (70-84): Significant problems requiring urgent attention, public safety concerns
- Medium (50-69): Important issues needing timely resolution, quality of life impacts
- Low (0-49): Minor concerns for routine maintenance, aesthetic improvements

**Analysis Instructions:**
1. Consider public safety impact
2. Assess urgency and time sensitivity
3. Evaluate potential for escalation
4. Consider community impact (number of affected citizens)
5. Factor in similar issues count (indicates widespread problem)

**Response Format (JSON):**
{{
  "priority": "Critical|High|Medium|Low",
  "score": 0-100,
  "reasoning": "Brief explanation of why this priority was assigned",
  "safetyRisk": "None|Low|Moderate|High|Critical",
  "urgencyLevel": "Can wait|Within week|Within 24h|Immediate",
  "impactAssessment": "Description of potential impact"
}}

Provide ONLY the JSON response, no additional text."""
