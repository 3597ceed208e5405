import pytest

from dal.record_store import RecordStore
from fakes import (
    FakeAudioClassifier,
    FakeInstructionGenerator,
    FakeTranscriber,
    FakeVision,
    RecordingBroadcaster,
    make_image_bytes,
)
from services.navigation.analysis_relay import AICollaborators, AnalysisRelay
from services.navigation.session_coordinator import SessionCoordinator


@pytest.fixture
def image_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def store() -> RecordStore:
    return RecordStore()


@pytest.fixture
def coordinator(store) -> SessionCoordinator:
    return SessionCoordinator(store)


@pytest.fixture
def recorder() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
def ai() -> AICollaborators:
    return AICollaborators(
        vision=FakeVision(),
        transcriber=FakeTranscriber(),
        audio_classifier=FakeAudioClassifier(),
        instruction_generator=FakeInstructionGenerator(),
    )


@pytest.fixture
def relay(store, coordinator, recorder, ai) -> AnalysisRelay:
    return AnalysisRelay(store, coordinator, recorder, ai, max_upload_bytes=64 * 1024)
