"""Prompt and instruction templates for summarizing articles and writing scripts."""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

from ..config import ProgramConfig
from ..contracts import ContentItem, ListenerNote, SpeakerMode, SummarizedItem

SUMMARIZE_INSTRUCTIONS = """
You are a professional editor.
From the technical article given by the user, extract the important points an
engineer can learn from, as a bullet list. Be as concrete as possible so the
context is easy to follow. Readers of the summary and key points are software
engineers; content that is easy for them to understand is appreciated.

## Constraints
  - The summary is between 1500 and 2000 characters long
  - Do not include markdown, code, line breaks or URLs in the summary
""".strip()

SCRIPT_REQUEST = (
    "Write the radio program script following the given instructions. "
    "The output must follow the schema specified as the output structure."
)

HOST = "Postel"
CO_HOST = "John"


def summarize_prompt(item: ContentItem) -> str:
    return (
        "Summarize the following article. "
        "The output must follow the schema specified as the output structure.\n"
        f"----\n{item.content}\n----"
    )


def format_program_date(program_date: date) -> str:
    return program_date.strftime("%A, %B %d, %Y").replace(" 0", " ")


def _speaker_instructions(speaker_mode: SpeakerMode) -> str:
    if speaker_mode is SpeakerMode.MULTI:
        return f"""
- The program has a cheerful atmosphere and the hosts talk like FM radio personalities
- There are two hosts, "{HOST}" and "{CO_HOST}"
- {HOST} is intelligent and calm, respects engineers, and leads the program and asks questions
- {CO_HOST} knows technology well and is good at clear explanations; he covers the technical details
- Both speak gently and politely and keep the dialogue natural
- The two explain each article together in conversation"""
    return f"""
- The program has a cheerful atmosphere and the host talks like an FM radio personality
- There is one host, "{HOST}"
- {HOST} is intelligent and calm and respects engineers
- The host speaks gently and politely"""


def _greeting(speaker_mode: SpeakerMode, program_name: str) -> str:
    if speaker_mode is SpeakerMode.MULTI:
        return f'"Hello, this is {HOST} from {program_name}." "And I\'m {CO_HOST}."'
    return f'"Hello, this is {HOST} from {program_name}."'


def _opening_instructions(
    speaker_mode: SpeakerMode,
    program_name: str,
    item_count: int,
    audience: Optional[str] = None,
) -> str:
    lines = [
        "### Opening",
        "",
        f"- Start by greeting the listeners, saying the program name and the host names, e.g. {_greeting(speaker_mode, program_name)}",
        "- Mention today's date (month, day and weekday) and chat about it for about 30 seconds",
    ]
    if speaker_mode is SpeakerMode.MULTI:
        lines.append("    - Develop the chat as a natural conversation between the two hosts")
    if audience:
        lines.append(f"- {audience}")
    lines.append(f"- Tell the listeners how many articles are introduced today ({item_count})")
    return "\n".join(lines)


def _explanation_instructions(
    speaker_mode: SpeakerMode,
    item_count: int,
    program: ProgramConfig,
    sectioned: bool,
) -> str:
    lines = [
        "### Article explanations",
        "",
        f"- Explain all {item_count} articles (this is mandatory)",
        "    - Only explain the articles listed below and never explain the same article twice",
        "- Use the summary and key points of each article and do not leave out any key point",
        "- Write the explanations as spoken lines for the program",
    ]
    if sectioned:
        lines += [
            "- Each explanation has three parts: intro, point by point explanation and wrap-up",
            "    - In the intro, say which article number it is (and whether it is the last one), its title, author and tags",
            "    - Only mention the tags that are given",
        ]
    else:
        lines.append("- Start each explanation with the article title and its author")
    if speaker_mode is SpeakerMode.MULTI:
        lines.append(
            f"- {HOST} asks questions and confirms points while {CO_HOST} explains the technical details"
        )
    lines += [
        "- Explain technical content gently; use at most one analogy per article",
        "- Do not read the key points verbatim",
        f"- Each article explanation is between {program.min_item_chars} and {program.max_item_chars} characters",
    ]
    return "\n".join(lines)


def _listener_note_instructions(
    speaker_mode: SpeakerMode, notes: Sequence[ListenerNote]
) -> str:
    if not notes:
        return ""
    answer = (
        f"    - {HOST} and {CO_HOST} discuss the letter and answer it politely"
        if speaker_mode is SpeakerMode.MULTI
        else "    - Answer the letter politely"
    )
    return "\n".join(
        [
            "### Letters from listeners",
            "",
            "- After the article explanations, introduce the letters from listeners",
            "    - Read the pen name and the letter",
            answer,
            "    - Thank the listener for the letter",
            "- Answer technical questions in detail and show empathy for impressions",
        ]
    )


def _ending_instructions(speaker_mode: SpeakerMode, item_count: int) -> str:
    if speaker_mode is SpeakerMode.MULTI:
        sign_off = f'"This was {HOST}." "This was {CO_HOST}." "See you in the next program."'
    else:
        sign_off = f'"This was {HOST}. See you in the next program."'
    return "\n".join(
        [
            "### Ending",
            "",
            f"- Briefly review all {item_count} articles introduced today, with title and a short summary",
            "- Tell the listeners that links to the articles are in the show notes",
            "- Invite feedback and letters about the program",
            f"- Close with {sign_off}",
        ]
    )


def _script_constraints(speaker_mode: SpeakerMode, program: ProgramConfig) -> str:
    lines = [
        "## Script constraints",
        "",
        "- Output the spoken lines only; the script is rendered with text-to-speech",
        "    - Keep sentences short so speech synthesis does not fail on long sentences",
        '- "Qiita" is read as "Kiita"',
        "- Do not include URLs, markdown, line break codes, backslashes or quote characters",
        f"- The whole script is at least {program.min_script_chars} characters",
        f"- The whole script is at most {program.max_script_chars} characters",
    ]
    if speaker_mode is SpeakerMode.MULTI:
        lines += [
            f'- Every line starts with the speaker name "{HOST}:" or "{CO_HOST}:"',
            "- Use a half-width colon after the speaker name",
        ]
    else:
        lines.append(f'- Do not prefix the script with "{HOST}:"')
    return "\n".join(lines)


def _output_structure(speaker_mode: SpeakerMode, post_fields: str) -> str:
    style = (
        f'dialogue, each line prefixed with "{HOST}:" or "{CO_HOST}:"'
        if speaker_mode is SpeakerMode.MULTI
        else "narration by a single host"
    )
    return "\n".join(
        [
            "### Output structure",
            "",
            "- 'title': program title",
            f"- 'opening': program opening ({style})",
            f"- 'posts': list of article explanations, each with {post_fields}",
            f"- 'ending': program ending ({style})",
        ]
    )


def _items_section(items: Sequence[SummarizedItem]) -> str:
    blocks = []
    for index, item in enumerate(items):
        tags = ", ".join(item.tags) if item.tags else "none"
        key_points = "\n".join(f"- {point}" for point in item.key_points)
        blocks.append(
            f"""#### Article {index + 1}

##### Article ID

{item.id}

##### Author

{item.author}

##### Title

{item.title}

##### Tags

{tags}

##### Summary

{item.summary}

##### Key points

{key_points}
"""
        )
    return "\n\n".join(blocks)


def _listener_notes_section(notes: Sequence[ListenerNote]) -> str:
    if not notes:
        return ""
    letters = "\n".join(
        f"#### Letter {index + 1}: from {note.name}\n\n{note.text}\n"
        for index, note in enumerate(notes)
    )
    return f"\n### Letters from listeners\n\n{letters}"


def _assemble(sections: List[str]) -> str:
    return "\n\n".join(section.strip("\n") for section in sections if section)


def headline_script_instructions(
    program_name: str,
    items: Sequence[SummarizedItem],
    program_date: date,
    program: ProgramConfig,
    listener_notes: Sequence[ListenerNote] = (),
    speaker_mode: SpeakerMode = SpeakerMode.SINGLE,
) -> str:
    """Build the instruction document for a headline topic program."""
    header = _assemble(
        [
            "## Instruction",
            "You are a professional radio writer. Using the information given, "
            "write the script the hosts read on air.",
            _speaker_instructions(speaker_mode),
            f'- The program name is "{program_name}"',
            "## Program structure",
            "### Overview\n\n- This daily program introduces the technical articles that are trending today",
            "### Program title\n\n- Use the titles of two of the articles, at most 60 characters, ending with \"and more\"",
            _opening_instructions(speaker_mode, program_name, len(items)),
            _explanation_instructions(speaker_mode, len(items), program, sectioned=True),
            _listener_note_instructions(speaker_mode, listener_notes),
            _ending_instructions(speaker_mode, len(items)),
            _script_constraints(speaker_mode, program),
            _output_structure(speaker_mode, "'id', 'title', 'intro', 'explanation' and 'summary'"),
            f"### Today's date\n\n{format_program_date(program_date)}",
            "### Articles to introduce",
        ]
    )
    return f"{header}\n\n{_items_section(items)}{_listener_notes_section(listener_notes)}"


def personalized_script_instructions(
    program_name: str,
    items: Sequence[SummarizedItem],
    program_date: date,
    program: ProgramConfig,
    user_name: Optional[str] = None,
    feed_name: Optional[str] = None,
    speaker_mode: SpeakerMode = SpeakerMode.SINGLE,
) -> str:
    """Build the instruction document for a personalized program."""
    audience = None
    if user_name:
        audience = f"Tell {user_name} that this program is delivered just for them"
        if feed_name:
            audience += f', based on their personal feed "{feed_name}"'
    header = _assemble(
        [
            "## Instruction",
            "You are a professional radio writer. Using the information given, "
            "write the script the hosts read on air.",
            _speaker_instructions(speaker_mode),
            f'- The program name is "{program_name}"',
            "## Program structure",
            "### Overview\n\n- This program introduces articles collected from the authors "
            "and tags the listener follows in their personal feed",
            "### Program title\n\n- Use the titles of two of the articles, at most 60 characters, ending with \"and more\"",
            _opening_instructions(speaker_mode, program_name, len(items), audience),
            _explanation_instructions(speaker_mode, len(items), program, sectioned=False),
            _ending_instructions(speaker_mode, len(items)),
            _script_constraints(speaker_mode, program),
            _output_structure(speaker_mode, "'id', 'title' and 'description'"),
            f"### Today's date\n\n{format_program_date(program_date)}",
            "### Articles to introduce",
        ]
    )
    return f"{header}\n\n{_items_section(items)}"
