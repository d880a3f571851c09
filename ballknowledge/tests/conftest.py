import json
from typing import List, Optional, Sequence

import pytest

from ballknowledge.analysis_pipeline.models import AnalysisRecord, ClipReference, SubjectContext
from ballknowledge.providers.base import VisionInferenceService
from ballknowledge.storage import AnalysisStore

COMPETITIVE_REPLY = {
    "summary": "Composed midfielder who dictates tempo.",
    "strengths": ["Vision", "Passing range", "Work rate"],
    "areasToImprove": ["Aerial duels", "Weak foot", "Pressing triggers"],
    "passCompletion": 88,
    "firstTouch": 81,
    "gameAwareness": 84,
    "defensiveWork": 72,
    "playerGrade": 8.4,
    "detailedAnalysis": {
        "technical": "Clean striking of the ball.",
        "tactical": "Finds pockets between the lines.",
        "physical": "Good endurance.",
        "mental": "Calm under pressure.",
    },
}

PRACTICE_REPLY = {
    "sessionSummary": "Focused dribbling session.",
    "skillFocus": "Dribbling",
    "currentLevel": "Intermediate",
    "technicalAnalysis": "Keeps the ball close at speed.",
    "improvementTips": ["Use both feet", "Head up", "Vary pace", "Shield the ball"],
    "practiceProgression": ["Cone slalom", "1v1 channel", "Rondo"],
    "youtubeRecommendations": ["Close control drills", "Beat a defender", "Ball mastery"],
}

HIGHLIGHTS_REPLY = {
    "highlights": [
        {"timestamp": "0:45", "description": "Excellent first touch under pressure", "quality": "excellent"},
        {"timestamp": "1:10", "description": "Line-breaking pass", "quality": "good"},
        {"timestamp": "2:05", "description": "Recovery tackle", "quality": "good"},
    ]
}


class FakeVisionService(VisionInferenceService):
    """Scripted inference service: pops one reply per call; exceptions are raised."""

    def __init__(self, replies: Optional[List] = None):
        self.replies = list(replies or [])
        self.calls = []
        self.closed = False

    async def complete(
        self,
        instructions: str,
        visual_references: Sequence[str],
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        self.calls.append({
            "instructions": instructions,
            "visual_references": list(visual_references),
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        })
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply

    async def close(self):
        self.closed = True


class InMemoryAnalysisStore(AnalysisStore):
    """Stores documents, not objects, so reloads go through the persistence shape."""

    def __init__(self):
        self.documents = {}

    async def save(self, owner_id, record):
        self.documents[(owner_id, record.id)] = json.loads(json.dumps(record.to_document()))
        return record.id

    async def get(self, owner_id, record_id):
        document = self.documents.get((owner_id, record_id))
        return AnalysisRecord.from_document(document) if document else None

    async def list_for_owner(self, owner_id):
        records = [
            AnalysisRecord.from_document(doc)
            for (owner, _), doc in self.documents.items()
            if owner == owner_id
        ]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    async def delete(self, owner_id, record_id):
        return self.documents.pop((owner_id, record_id), None) is not None


@pytest.fixture
def clip():
    return ClipReference(locator="https://cdn.example.com/clips/match.mp4", declared_duration_seconds=95)


@pytest.fixture
def subject():
    return SubjectContext(display_name="Sam Carter", role="Midfielder")


@pytest.fixture
def store():
    return InMemoryAnalysisStore()


@pytest.fixture
def make_service():
    return FakeVisionService


@pytest.fixture
def competitive_reply():
    return json.loads(json.dumps(COMPETITIVE_REPLY))


@pytest.fixture
def practice_reply():
    return json.loads(json.dumps(PRACTICE_REPLY))


@pytest.fixture
def highlights_reply():
    return json.loads(json.dumps(HIGHLIGHTS_REPLY))
