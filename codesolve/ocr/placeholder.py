from __future__ import annotations

import asyncio

from codesolve.ocr.base_ocr import ImageAsset, Provenance

_FACTORIAL = (
    "Write a function to calculate the factorial of a number. The factorial of n "
    "(denoted as n!) is the product of all positive integers less than or equal to n. "
    "For example, 5! = 5 × 4 × 3 × 2 × 1 = 120."
)

_FIBONACCI = (
    "Write a function that returns the n-th Fibonacci number. The sequence starts "
    "with F(0) = 0 and F(1) = 1, and every later term is the sum of the two before it. "
    "For example, F(10) = 55."
)

_PALINDROME = (
    "Write a function that checks whether a given string is a palindrome, ignoring "
    "case and non-alphanumeric characters. For example, 'A man, a plan, a canal: "
    "Panama' is a palindrome, while 'hello' is not."
)

_REVERSE = (
    "Create a function that takes a string as input and returns the string reversed. "
    "For example, if the input is 'hello', the output should be 'olleh'."
)

_PRIME = (
    "Write a function to check if a given number is prime. A prime number is a natural "
    "number greater than 1 that has no positive divisors other than 1 and itself."
)

_SORT = (
    "Implement a sorting algorithm to sort an array of integers in ascending order. "
    "You can use any sorting algorithm like bubble sort, quick sort, or merge sort."
)

GENERIC_PROBLEM = """Write a function to solve the following coding problem:

Given an array of integers, find the maximum sum of a contiguous subarray. This is known as the Maximum Subarray Problem.

Example:
Input: [-2, 1, -3, 4, -1, 2, 1, -5, 4]
Output: 6 (subarray [4, -1, 2, 1] has the maximum sum)

Please implement an efficient solution with optimal time complexity."""

# First match wins, so the specific topics come before the broad ones.
TOPIC_PROBLEMS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("factorial", "fact"), _FACTORIAL),
    (("fibonacci",), _FIBONACCI),
    (("palindrome",), _PALINDROME),
    (("reverse", "string"), _REVERSE),
    (("prime", "number"), _PRIME),
    (("sort", "array"), _SORT),
)


class PlaceholderGenerator:
    """Canned problem statements picked from keywords in the image filename.

    Used when no recognizer produced usable text, so the caller always has a
    plausible problem to hand to the solution generator.
    """

    name = Provenance.PLACEHOLDER

    def __init__(self, delay_seconds: float = 0.0) -> None:
        self._delay_seconds = delay_seconds

    def generate(self, image: ImageAsset) -> str:
        filename = (image.filename or "").lower()
        for keywords, problem in TOPIC_PROBLEMS:
            if any(keyword in filename for keyword in keywords):
                return problem
        return GENERIC_PROBLEM

    async def produce(self, image: ImageAsset) -> str:
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)
        return self.generate(image)
