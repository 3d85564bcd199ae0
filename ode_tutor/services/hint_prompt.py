"""
ode_tutor/services/hint_prompt.py

Jinja2 prompt template for the Hebrew step-by-step ODE tutor.

The prompt is one instruction block that carries everything the model needs
to judge a single answer:
  - Tone/format rules (Hebrew, short, never reveal the answer early)
  - The exercise and its complete worked solution
  - The current step, expected answer and the student's latest input
  - Earlier turns, so the model does not repeat a hint
  - The four-hint ladder for every step, plus common mistakes

Correctness is judged by the model, not here.
"""

from collections.abc import Sequence

from jinja2 import Template

from ode_tutor.core.logging import get_logger
from ode_tutor.schemas.hint import ConversationTurn
from ode_tutor.services.ode_problem import (
    COMMON_ERRORS,
    HINT_LADDER,
    PROBLEM_STATEMENT,
    PROBLEM_TITLE,
    REFERENCE_SOLUTION,
)

logger = get_logger(__name__)

STUDENT_LABEL = "תשובת סטודנט"
TUTOR_LABEL = "תגובת מורה"

HINT_PROMPT_TEMPLATE = """\

# CRITICAL INSTRUCTIONS
1. Respond in HEBREW only
2. Be PRACTICAL and SPECIFIC - give concrete mathematical guidance
3. Keep responses 2-4 sentences
4. Use gender-neutral language (plural forms)
5. NEVER give the complete final answer until {{ max_attempts }} attempts exhausted
6. NEVER repeat the same hint - check conversation history and progress
7. NEVER put quotes around equations - write them directly without '' or "" marks
8. ACCEPT ANY MATHEMATICALLY EQUIVALENT FORM of the correct answer

---

# The Exercise: {{ problem_title }}

## The Problem:
{{ problem_statement }}

## COMPLETE SOLUTIONS (your reference):

{{ reference_solution }}

---

## Current Step: {{ current_step }}
## Expected Answer: {{ expected_answer }}
## Student Input: {{ student_input }}

{% if history %}
## Previous Conversation:
{% for turn in history %}
{{ student_label }}: {{ turn.user }}
{{ tutor_label }}: {{ turn.ai }}

{% endfor %}
{% endif %}

---

# SPECIFIC HINTS BY STEP (give progressively):
{% for ladder in hint_ladder %}

## If Step {{ ladder.step }} ({{ ladder.topic }}):
{% for hint in ladder.hints %}
- Hint {{ loop.index }}: "{{ hint }}"
{% endfor %}
{% endfor %}

# COMMON ERRORS TO CHECK:
{% for error in common_errors %}
- {{ error }}
{% endfor %}

# YOUR RESPONSE:
1. If CORRECT: "נכון! [brief confirmation]" and encourage next step
2. If INCORRECT: Identify the specific error and give the appropriate hint from above
3. If student asks for help/hint: Give the next hint in progression
4. After 3+ attempts: Give more explicit guidance, show intermediate steps
"""

# trim_blocks/lstrip_blocks keep the {% %} lines from leaving blank lines behind.
_compiled_template = Template(
    HINT_PROMPT_TEMPLATE,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def compile_hint_prompt(
    *,
    current_step: int,
    expected_answer: str,
    student_input: str,
    history: Sequence[ConversationTurn] = (),
    max_attempts: int = 10,
) -> str:
    """Compile the tutor prompt from the Jinja2 template.

    Args:
        current_step: The step (1-5) the student is answering.
        expected_answer: The answer the client expects for this step.
        student_input: The student's latest answer, verbatim.
        history: Earlier turns, oldest first.
        max_attempts: Attempt ceiling quoted in the "never reveal" rule.

    Returns:
        The compiled prompt string ready for the LLM.
    """
    rendered = _compiled_template.render(
        max_attempts=max_attempts,
        problem_title=PROBLEM_TITLE,
        problem_statement=PROBLEM_STATEMENT,
        reference_solution=REFERENCE_SOLUTION,
        current_step=current_step,
        expected_answer=expected_answer,
        student_input=student_input,
        history=list(history),
        student_label=STUDENT_LABEL,
        tutor_label=TUTOR_LABEL,
        hint_ladder=HINT_LADDER,
        common_errors=COMMON_ERRORS,
    )

    logger.debug(
        "hint_prompt_compiled",
        prompt_length=len(rendered),
        current_step=current_step,
        history_turns=len(history),
    )

    return rendered
