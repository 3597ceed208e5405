"""Prompt builders for scene analysis, audio classification, and instructions."""

from __future__ import annotations

from typing import Iterable, Optional


def vision_system_prompt() -> str:
    """Return the scene-analysis system prompt."""
    return (
        "You are a vision assistant for visually impaired navigation. "
        "Identify objects and landmarks that help with orientation, potential obstacles or hazards, "
        "and any visible text such as signs, gate numbers, or directions. "
        "Give a distance estimate and a position (left, right, ahead, behind) relative to the camera."
    )


def vision_user_prompt() -> str:
    return "Analyze this image for navigation assistance for a visually impaired person."


def audio_system_prompt() -> str:
    """Return the audio-classification system prompt."""
    return (
        "You are an audio assistant for visually impaired navigation. From a transcript, identify public "
        "announcements, vehicle or traffic sounds, conversations that contain directions, and warnings or alarms. "
        "Classify each event by importance and whether immediate action is required."
    )


def audio_user_prompt(transcript: str) -> str:
    return f'Analyze this transcribed audio for navigation assistance: "{transcript}"'


def instruction_system_prompt() -> str:
    """Return the instruction-generation system prompt."""
    return (
        "You are a navigation assistant for visually impaired users. Generate one clear, actionable instruction. "
        "Keep it concise, include specific distances and directions, prioritize safety, and use natural language."
    )


def _joined(items: Iterable[str]) -> str:
    return ", ".join(items) or "None"


def instruction_user_prompt(
    detected_objects: Iterable[str],
    recognized_text: Iterable[str],
    user_query: Optional[str],
    current_location: Optional[str],
    destination: Optional[str],
) -> str:
    """Return the user prompt describing what the user is facing right now."""
    return (
        "Generate a navigation instruction based on:\n"
        f"Detected objects: {_joined(detected_objects)}\n"
        f"Recognized text: {_joined(recognized_text)}\n"
        f"User query: {user_query or 'None'}\n"
        f"Current location: {current_location or 'Unknown'}\n"
        f"Destination: {destination or 'Not specified'}"
    )
