"""Function-tool definitions that force structured output from the Responses API."""

from typing import Any, Dict

VISION_FUNCTION_NAME = "report_navigation_scene"
AUDIO_FUNCTION_NAME = "report_audio_events"
INSTRUCTION_FUNCTION_NAME = "issue_navigation_instruction"

_SCENE_OBJECT: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Short name of the object or landmark."},
        "description": {"type": "string", "description": "One sentence describing it."},
        "distance": {"type": "string", "description": "Estimated distance, e.g. '2m'."},
        "position": {
            "type": "string",
            "description": "Position relative to the camera: left, right, ahead, or behind.",
        },
        "confidence": {"type": "integer", "description": "Confidence from 0 to 100."},
    },
    "required": ["name", "description", "distance", "position", "confidence"],
    "additionalProperties": False,
}

VISION_FUNCTION: Dict[str, Any] = {
    "type": "function",
    "name": VISION_FUNCTION_NAME,
    "description": "Report landmarks, obstacles, and visible text that matter for walking navigation.",
    "parameters": {
        "type": "object",
        "properties": {
            "objects": {"type": "array", "items": _SCENE_OBJECT},
            "obstacles": {"type": "array", "items": _SCENE_OBJECT},
            "textContent": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "type": {"type": "string", "description": "Kind of text, e.g. sign, gate, direction."},
                        "content": {"type": "string", "description": "The text exactly as read."},
                        "confidence": {"type": "integer", "description": "Confidence from 0 to 100."},
                    },
                    "required": ["type", "content", "confidence"],
                    "additionalProperties": False,
                },
            },
        },
        "required": ["objects", "obstacles", "textContent"],
        "additionalProperties": False,
    },
    "strict": True,
}

AUDIO_FUNCTION: Dict[str, Any] = {
    "type": "function",
    "name": AUDIO_FUNCTION_NAME,
    "description": "Report the navigation-relevant events heard in a transcript.",
    "parameters": {
        "type": "object",
        "properties": {
            "events": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "type": {
                            "type": "string",
                            "description": "announcement, traffic, conversation, or alarm.",
                        },
                        "content": {"type": "string"},
                        "importance": {"type": "string", "enum": ["low", "medium", "high"]},
                        "actionRequired": {"type": "boolean"},
                    },
                    "required": ["type", "content", "importance", "actionRequired"],
                    "additionalProperties": False,
                },
            },
        },
        "required": ["events"],
        "additionalProperties": False,
    },
    "strict": True,
}

INSTRUCTION_FUNCTION: Dict[str, Any] = {
    "type": "function",
    "name": INSTRUCTION_FUNCTION_NAME,
    "description": "Issue the next spoken navigation instruction.",
    "parameters": {
        "type": "object",
        "properties": {
            "instruction": {"type": "string"},
            "priority": {"type": "string", "enum": ["normal", "urgent", "warning"]},
            "estimatedDuration": {"type": "string", "description": "Rough time to complete, e.g. '30 seconds'."},
        },
        "required": ["instruction", "priority", "estimatedDuration"],
        "additionalProperties": False,
    },
    "strict": True,
}
