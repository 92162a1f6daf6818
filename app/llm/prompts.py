# FILE: app/llm/prompts.py
"""
System instructions per task type and request composition per message shape.

Two request shapes exist across backends:
- single_string: instruction and prompt joined into one text (Gemini)
- chat_messages: [{"role": "system"}, {"role": "user"}] list (Mistral, Groq)
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Union

from app.llm.schemas import TaskType


class MessageShape(str, Enum):
    SINGLE_STRING = "single_string"
    CHAT_MESSAGES = "chat_messages"


PLAN_INSTRUCTION = (
    "You are an expert software developer. Create a detailed, step-by-step "
    "development plan for the following request. For each step, provide:\n"
    "1. A clear description of what needs to be done\n"
    "2. A specific prompt that can be given to an AI to implement that step\n"
    "\n"
    "Format your response as a JSON array of objects, each with 'description' "
    "and 'prompt' fields. Return only the JSON array."
)

STRUCTURE_INSTRUCTION = (
    "You are an expert software developer. Generate a file structure for a "
    "local application based on the following requirements. Include all "
    "necessary files and directories.\n"
    "\n"
    "Format your response as a JSON array of objects with the following structure:\n"
    "{\n"
    '  "name": "filename or directory name",\n'
    '  "type": "file" or "directory",\n'
    '  "children": [] (optional, for directories only)\n'
    "}\n"
    "Return only the JSON array."
)

CODE_INSTRUCTION = (
    "You are an expert programmer. Generate clean, well-documented code based "
    "on the following prompt. Only return the code, no explanations."
)

SYSTEM_INSTRUCTIONS: Dict[TaskType, str] = {
    TaskType.PLAN: PLAN_INSTRUCTION,
    TaskType.STRUCTURE: STRUCTURE_INSTRUCTION,
    TaskType.CODE: CODE_INSTRUCTION,
}

USER_REQUEST_SEPARATOR = "\n\nUser request: "


def system_instruction_for(task_type: TaskType) -> str:
    return SYSTEM_INSTRUCTIONS[task_type]


def compose_single_prompt(system_instruction: str, user_prompt: str) -> str:
    return f"{system_instruction}{USER_REQUEST_SEPARATOR}{user_prompt}"


def compose_chat_messages(system_instruction: str, user_prompt: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": system_instruction},
        {"role": "user", "content": user_prompt},
    ]


def compose_request(
    shape: MessageShape,
    system_instruction: str,
    user_prompt: str,
) -> Union[str, List[Dict[str, str]]]:
    if shape == MessageShape.SINGLE_STRING:
        return compose_single_prompt(system_instruction, user_prompt)
    return compose_chat_messages(system_instruction, user_prompt)


__all__ = [
    "MessageShape",
    "SYSTEM_INSTRUCTIONS",
    "system_instruction_for",
    "compose_single_prompt",
    "compose_chat_messages",
    "compose_request",
]
