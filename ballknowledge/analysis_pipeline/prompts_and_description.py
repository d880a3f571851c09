"""
Instruction templates sent to the vision model, one per evaluation mode plus the
highlight pass. Each template spells out the JSON shape the model must return.
"""

COMPETITIVE_EVALUATION_PROMPT = """You are an expert soccer talent evaluator. Analyze this {duration_minutes}-minute game footage of {display_name}, a {role}.

Return ONLY valid JSON (no markdown, no code blocks). Schema:
{{
  "summary": "2-3 paragraph professional evaluation",
  "strengths": ["strength 1", "strength 2", "strength 3"],
  "areasToImprove": ["area 1", "area 2", "area 3"],
  "passCompletion": 85,
  "firstTouch": 78,
  "gameAwareness": 82,
  "defensiveWork": 75,
  "playerGrade": 8.2,
  "detailedAnalysis": {{
    "technical": "paragraph on technical skills",
    "tactical": "paragraph on tactical understanding",
    "physical": "paragraph on physical attributes",
    "mental": "paragraph on decision-making"
  }}
}}
passCompletion, firstTouch, gameAwareness and defensiveWork are scores from 0 to 100.
playerGrade is an overall grade from 0 to 10 with one decimal."""

PRACTICE_EVALUATION_PROMPT = """You are an expert soccer training analyst. Analyze this {duration_minutes}-minute training footage of {display_name}, a {role}.

Return ONLY valid JSON (no markdown, no code blocks). Schema:
{{
  "sessionSummary": "2-3 paragraph professional evaluation of training session",
  "skillFocus": "Primary skill being trained (e.g., 'Dribbling', 'Passing', 'Shooting')",
  "currentLevel": "Beginner | Intermediate | Advanced",
  "technicalAnalysis": "Detailed analysis of technical execution",
  "improvementTips": ["tip 1", "tip 2", "tip 3", "tip 4"],
  "practiceProgression": ["drill 1", "drill 2", "drill 3"],
  "youtubeRecommendations": ["video title 1", "video title 2", "video title 3"]
}}"""

HIGHLIGHTS_PROMPT = """Identify the 3-5 best moments from this {label} of {display_name}.

Return ONLY valid JSON (no markdown, no code blocks). Schema:
{{
  "highlights": [
    {{
      "timestamp": "0:45",
      "description": "Excellent first touch under pressure",
      "quality": "excellent"
    }}
  ]
}}"""
