"""Letter grades and pass/fail for a percentage.

Imported by both the API and the client, so it must stay free of database
and web imports.
"""

# (lower bound %, letter); first match wins
GRADE_BANDS = ((90, "A+"), (80, "A"), (70, "B"), (60, "C"))
FAIL_GRADE = "F"
PASS_MARK = 70


def grade_for(pct: float) -> str:
    for floor, letter in GRADE_BANDS:
        if pct >= floor:
            return letter
    return FAIL_GRADE


def passed(pct: float) -> bool:
    return pct >= PASS_MARK
