"""
ode_tutor/services/ode_problem.py

The one exercise this tutor knows: a 3×3 non-homogeneous linear ODE system
with a double eigenvalue.

Everything here is static reference material that gets embedded in the hint
prompt. Nothing is computed; the model judges the student's answer against
these texts.
"""

from dataclasses import dataclass

STEP_COUNT = 5


@dataclass(frozen=True)
class StepHints:
    """The hint ladder for one step: four hints, each more explicit than the last."""

    step: int
    topic: str
    hints: tuple[str, str, str, str]


PROBLEM_TITLE = "3×3 Non-Homogeneous ODE System with Double Eigenvalue"

PROBLEM_STATEMENT = """\
x' = Ax + b

A = [4, -1, -1; 1, 5, 2; 0, 1, 5]
b = e^{3t}[1, 1, 0]^T

Find the general solution."""

REFERENCE_SOLUTION = """\
**Step 1 - Find Eigenvalues:**
- Characteristic polynomial: |λI - A| = (λ-4)²(λ-6)
- ANSWER: λ₁ = 6 (simple), λ₂ = 4 (double, multiplicity 2)

**Step 2 - Eigenvector for λ = 6:**
- (6I - A)v = 0
- Row reduce [2, 1, 1; -1, 1, -2; 0, -1, 1]
- ANSWER: v₁ = [-1, 1, 1]^T

**Step 3 - Eigenvector for λ = 4:**
- (4I - A)v = 0
- Row reduce [0, 1, 1; -1, -1, -2; 0, -1, -1]
- Geometric multiplicity = 1 (only one eigenvector)
- ANSWER: v₂ = [1, 1, -1]^T

**Step 4 - Generalized Eigenvector (Third Solution):**
- Since λ=4 has algebraic multiplicity 2 but geometric multiplicity 1, need generalized eigenvector
- Solve (A - 4I)w = v₂
- w₁ is free, choose w₁ = 0: w₂ = -3, w₃ = 2
- ANSWER: w = [0, -3, 2]^T
- Third solution: x₃(t) = te^{4t}v₂ + e^{4t}w = e^{4t}[t, t-3, 2-t]^T

**Step 5 - Particular Solution:**
- Since 3 is NOT an eigenvalue, try x_p = e^{3t}[a₁, a₂, a₃]^T
- Solve (3I - A)[a₁, a₂, a₃]^T = [1, 1, 0]^T
- ANSWER: a₁ = -1, a₂ = 0, a₃ = 0
- x_p(t) = e^{3t}[-1, 0, 0]^T

**General Solution:**
x(t) = -C₁e^{6t} + C₂e^{4t} + C₃te^{4t} - e^{3t}
y(t) = C₁e^{6t} + C₂e^{4t} + C₃(t-3)e^{4t}
z(t) = C₁e^{6t} - C₂e^{4t} + C₃(2-t)e^{4t}"""

HINT_LADDER: tuple[StepHints, ...] = (
    StepHints(
        step=1,
        topic="eigenvalues",
        hints=(
            "חשבו את הפולינום האופייני |λI - A| = 0. זוהי מטריצה 3×3.",
            "פתחו את הדטרמיננטה לפי שורה או עמודה. נסו לפי העמודה הראשונה.",
            "הפולינום האופייני הוא (λ-4)²(λ-6).",
            "λ₁ = 6 (ערך עצמי פשוט), λ₂ = 4 (ערך עצמי כפול).",
        ),
    ),
    StepHints(
        step=2,
        topic="eigenvector for λ=6",
        hints=(
            "הציבו λ = 6 במטריצה (λI - A) ופתרו (6I - A)v = 0.",
            "המטריצה היא [2, 1, 1; -1, 1, -2; 0, -1, 1]. דרגו אותה.",
            "אחרי דירוג: v₃ = t (חופשי), v₂ = t, v₁ = -t.",
            "הוקטור העצמי הוא v₁ = [-1, 1, 1]^T.",
        ),
    ),
    StepHints(
        step=3,
        topic="eigenvector for λ=4",
        hints=(
            "הציבו λ = 4 במטריצה (λI - A) ופתרו (4I - A)v = 0.",
            "המטריצה היא [0, 1, 1; -1, -1, -2; 0, -1, -1]. דרגו אותה.",
            "שימו לב שהריבוי הגאומטרי הוא 1 - יש רק וקטור עצמי אחד!",
            "הוקטור העצמי הוא v₂ = [1, 1, -1]^T.",
        ),
    ),
    StepHints(
        step=4,
        topic="generalized eigenvector",
        hints=(
            "מכיוון שלערך העצמי הכפול λ=4 יש רק וקטור עצמי אחד, צריך וקטור מוכלל w.",
            "פתרו את המערכת (A - 4I)w = v₂, כלומר [0,-1,-1; 1,1,2; 0,1,1]w = [1,1,-1]^T.",
            "w₁ הוא פרמטר חופשי. בחרו w₁ = 0 ומצאו w₂ ו-w₃.",
            "w₂ = -3, w₃ = 2. הוקטור המוכלל הוא w = [0, -3, 2]^T.",
        ),
    ),
    StepHints(
        step=5,
        topic="particular solution",
        hints=(
            "מכיוון ש-3 אינו ערך עצמי, ננסה פתרון פרטי x_p = e^{3t}[a₁, a₂, a₃]^T.",
            "הציבו במערכת וצמצמו את e^{3t}. תקבלו (3I - A)a = [1, 1, 0]^T.",
            "המטריצה (3I - A) = [-1, 1, 1; -1, -2, -2; 0, -1, -2]. פתרו את המערכת.",
            "a₁ = -1, a₂ = 0, a₃ = 0. הפתרון הפרטי הוא x_p = e^{3t}[-1, 0, 0]^T.",
        ),
    ),
)

COMMON_ERRORS: tuple[str, ...] = (
    "Wrong determinant calculation for 3×3 matrix",
    "Confusing simple and double eigenvalue",
    "Not recognizing that geometric multiplicity < algebraic multiplicity",
    "Wrong sign in (A - 4I) vs (4I - A)",
    "Forgetting that 3 is not an eigenvalue (so simple ansatz works)",
    "Sign errors in the particular solution system",
)
