"""Prompt builders for the event-extraction call.

Constructs the system prompt that instructs the model to turn free text into
a single JSON event object, and the user message wrapping the raw text.
Both builders are pure: the same input always yields the same prompt.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from text2cal.models.request import ChatMessage


@dataclass(frozen=True)
class HolidayRange:
    """A public holiday period and the weekend days worked to make up for it.

    Attributes:
        name: Holiday name as shown to the model.
        first_day: First day off (inclusive).
        last_day: Last day off (inclusive).
        makeup_workdays: Weekend days that are working days because of
            this holiday.
    """

    name: str
    first_day: date
    last_day: date
    makeup_workdays: tuple[date, ...] = ()


# Mainland China public holiday arrangements published by the State Council.
HOLIDAY_SCHEDULES: dict[int, tuple[HolidayRange, ...]] = {
    2025: (
        HolidayRange("New Year's Day (元旦)", date(2025, 1, 1), date(2025, 1, 1)),
        HolidayRange(
            "Spring Festival (春节)",
            date(2025, 1, 28),
            date(2025, 2, 4),
            (date(2025, 1, 26), date(2025, 2, 8)),
        ),
        HolidayRange("Qingming Festival (清明节)", date(2025, 4, 4), date(2025, 4, 6)),
        HolidayRange(
            "Labour Day (劳动节)",
            date(2025, 5, 1),
            date(2025, 5, 5),
            (date(2025, 4, 27),),
        ),
        HolidayRange("Dragon Boat Festival (端午节)", date(2025, 5, 31), date(2025, 6, 2)),
        HolidayRange(
            "National Day and Mid-Autumn Festival (国庆节、中秋节)",
            date(2025, 10, 1),
            date(2025, 10, 8),
            (date(2025, 9, 28), date(2025, 10, 11)),
        ),
    ),
    2026: (
        HolidayRange(
            "New Year's Day (元旦)",
            date(2026, 1, 1),
            date(2026, 1, 3),
            (date(2026, 1, 4),),
        ),
        HolidayRange(
            "Spring Festival (春节)",
            date(2026, 2, 15),
            date(2026, 2, 23),
            (date(2026, 2, 14), date(2026, 2, 28)),
        ),
        HolidayRange("Qingming Festival (清明节)", date(2026, 4, 4), date(2026, 4, 6)),
        HolidayRange(
            "Labour Day (劳动节)",
            date(2026, 5, 1),
            date(2026, 5, 5),
            (date(2026, 5, 9),),
        ),
        HolidayRange("Dragon Boat Festival (端午节)", date(2026, 6, 19), date(2026, 6, 21)),
        HolidayRange("Mid-Autumn Festival (中秋节)", date(2026, 9, 25), date(2026, 9, 27)),
        HolidayRange(
            "National Day (国庆节)",
            date(2026, 10, 1),
            date(2026, 10, 7),
            (date(2026, 9, 20), date(2026, 10, 10)),
        ),
    ),
}

OUTPUT_FIELDS = (
    "summary",
    "startTime",
    "endTime",
    "location",
    "description",
    "attendees",
    "reminderMinutes",
)


def format_holiday_table(year: int) -> str:
    """Render the holiday table for *year* as prompt lines.

    Returns a one-line notice when no schedule is known for *year*.
    """
    schedule = HOLIDAY_SCHEDULES.get(year)
    if not schedule:
        return f"No holiday table is available for {year}; treat dates literally."

    lines: list[str] = []
    for holiday in schedule:
        if holiday.first_day == holiday.last_day:
            span = holiday.first_day.isoformat()
        else:
            span = f"{holiday.first_day.isoformat()} to {holiday.last_day.isoformat()}"
        line = f"- {holiday.name}: days off {span}"
        if holiday.makeup_workdays:
            workdays = ", ".join(day.isoformat() for day in holiday.makeup_workdays)
            line += f"; make-up working days {workdays}"
        lines.append(line)
    return "\n".join(lines)


def build_system_prompt(reference_date: date) -> str:
    """Build the system prompt for the extraction call.

    The prompt fixes the JSON output contract, injects the reference date and
    the holiday table for its year, and spells out the language, default and
    description-preservation rules the model must follow.

    Args:
        reference_date: The caller's current local date, used by the model
            to resolve expressions such as "tomorrow" or "next Friday".

    Returns:
        The complete system prompt string.
    """
    fields = ", ".join(f'"{name}"' for name in OUTPUT_FIELDS)
    return f"""\
You are an assistant that turns a piece of free text into exactly one calendar event.

## Current Date

Today is {reference_date.isoformat()} ({reference_date.strftime("%A")}).
Resolve every relative date or time ("tomorrow", "next Friday", "tonight",
"in two weeks") against this date.

## Holidays and Adjusted Working Days ({reference_date.year})

{format_holiday_table(reference_date.year)}

Use this table to interpret references such as "after the holiday" or
"the first working day after National Day".

## Output Format

Return a single JSON object and nothing else. It must have exactly these
fields: {fields}.

- "summary": short event title (string, required)
- "startTime": local start time formatted as YYYY-MM-DDTHH:mm:ss (required)
- "endTime": local end time formatted as YYYY-MM-DDTHH:mm:ss (required)
- "location": location string, or null if no location is mentioned
- "description": description string, or null if there is nothing to add
- "attendees": array of attendee e-mail addresses; [] if none are mentioned
- "reminderMinutes": integer minutes before the start to send a reminder

Do not include a UTC offset or a "Z" suffix in the times.

## Language

Write "summary" and "description" in the same language as the input text.
If the input contains Chinese, Japanese or Korean characters, answer in that
language. Otherwise answer in the language the input is predominantly
written in. Never translate names, addresses or codes.

## Defaults for Missing Information

- No end time or duration: the event lasts 1 hour; meals (breakfast, lunch,
  dinner, coffee, drinks) last 1.5 hours.
- "Morning" without a time means 09:00; "afternoon" without a time means 14:00.
- No reminder mentioned: "reminderMinutes" is 15. For meetings or
  presentations explicitly described as important, use 30.
- No location mentioned: "location" is null.
- No attendees mentioned: "attendees" is [].

## Description

Keep in "description", verbatim, every detail that does not fit another field:
conferencing platform, meeting ID, passcode, dial-in numbers and links,
citations and references, and technical content such as code, commands or
version numbers. Only leave out text that exactly duplicates "summary",
"location", the times or the attendees.
"""


def build_user_message(raw_text: str) -> str:
    """Build the user message wrapping the text to analyse.

    Args:
        raw_text: The user's free text, passed through unchanged.

    Returns:
        The user message string.
    """
    return (
        "Extract the calendar event from the following text:\n\n"
        f"{raw_text}"
    )


def build_messages(raw_text: str, reference_date: date) -> tuple[ChatMessage, ChatMessage]:
    """Return the system and user messages for one extraction attempt."""
    return (
        ChatMessage(role="system", content=build_system_prompt(reference_date)),
        ChatMessage(role="user", content=build_user_message(raw_text)),
    )
