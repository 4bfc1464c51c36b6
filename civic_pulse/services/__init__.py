"""
Services layer - triage logic lives here, routes stay thin.

DESIGN PRINCIPLE:
- The rule-based classifier is pure and always available
- AI assessment and the similar-issue lookup are best-effort
- The orchestrator is the only place that decides between them
"""
