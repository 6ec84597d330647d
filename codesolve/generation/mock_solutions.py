from __future__ import annotations

from codesolve.generation.models import Language, Solution

_FACTORIAL_PYTHON = '''def factorial(n):
    if n < 0:
        raise ValueError("Factorial is not defined for negative numbers")
    elif n == 0 or n == 1:
        return 1
    else:
        return n * factorial(n - 1)

if __name__ == "__main__":
    number = 5
    result = factorial(number)
    print(f"Factorial of {number} is {result}")'''

_FACTORIAL_JAVA = '''public class Factorial {

    public static long factorial(int n) {
        if (n < 0) {
            throw new IllegalArgumentException("Factorial is not defined for negative numbers");
        } else if (n == 0 || n == 1) {
            return 1;
        } else {
            return n * factorial(n - 1);
        }
    }

    public static void main(String[] args) {
        int number = 5;
        long result = factorial(number);
        System.out.println("Factorial of " + number + " is " + result);
    }
}'''

_GENERIC_PYTHON = '''def solve_problem():
    print("Solving the problem...")
    pass

if __name__ == "__main__":
    solve_problem()'''

_GENERIC_JAVA = '''public class ProblemSolver {

    public static void solveProblem() {
        System.out.println("Solving the problem...");
    }

    public static void main(String[] args) {
        solveProblem();
    }
}'''


def mock_solution(problem: str, language: Language) -> Solution:
    """Demo solution used when no LLM provider is configured or reachable."""
    if "factorial" in problem.lower():
        if language == "python":
            return Solution(
                code=_FACTORIAL_PYTHON,
                explanation=(
                    "This Python solution implements factorial using recursion. It handles "
                    "negative input and the base cases 0 and 1; any other positive integer is "
                    "multiplied by the factorial of (n-1)."
                ),
                language="python",
            )
        return Solution(
            code=_FACTORIAL_JAVA,
            explanation=(
                "This Java solution implements factorial using recursion. It rejects negative "
                "numbers with an exception, handles the base cases 0 and 1, and returns a long "
                "to hold larger values."
            ),
            language="java",
        )

    return Solution(
        code=_GENERIC_PYTHON if language == "python" else _GENERIC_JAVA,
        explanation=(
            f"This is a generic {language} solution template. Please provide more specific "
            "requirements for a complete implementation."
        ),
        language=language,
    )
