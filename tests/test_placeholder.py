from __future__ import annotations

import time

import pytest

from codesolve.ocr.base_ocr import ImageAsset
from codesolve.ocr.placeholder import GENERIC_PROBLEM, PlaceholderGenerator


def _image(filename: str) -> ImageAsset:
    return ImageAsset(data=b"img", content_type="image/png", filename=filename)


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("Factorial_Problem.PNG", "factorial of a number"),
        ("fact.jpg", "factorial of a number"),
        ("FIBONACCI.bmp", "Fibonacci number"),
        ("palindrome-check.gif", "palindrome"),
        ("reverse.png", "returns the string reversed"),
        ("string_task.png", "returns the string reversed"),
        ("is_prime.png", "check if a given number is prime"),
        ("sort_test.png", "sort an array of integers in ascending order"),
        ("array.jpeg", "sort an array of integers in ascending order"),
    ],
)
def test_keyword_selects_topic(filename: str, expected: str) -> None:
    assert expected in PlaceholderGenerator().generate(_image(filename))


def test_unknown_filename_gets_generic_problem() -> None:
    text = PlaceholderGenerator().generate(_image("IMG_2041.jpg"))
    assert text == GENERIC_PROBLEM
    assert "Maximum Subarray Problem" in text


def test_empty_filename_gets_generic_problem() -> None:
    assert PlaceholderGenerator().generate(_image("")) == GENERIC_PROBLEM


def test_generate_is_deterministic() -> None:
    generator = PlaceholderGenerator()
    first = generator.generate(_image("Palindrome.png"))
    second = PlaceholderGenerator().generate(_image("Palindrome.png"))
    assert first == second


def test_generate_ignores_image_bytes() -> None:
    generator = PlaceholderGenerator()
    a = ImageAsset(data=b"a", content_type="image/png", filename="prime.png")
    b = ImageAsset(data=b"bbbb", content_type="image/gif", filename="prime.png")
    assert generator.generate(a) == generator.generate(b)


@pytest.mark.asyncio
async def test_produce_matches_generate() -> None:
    generator = PlaceholderGenerator()
    image = _image("sort.png")
    assert await generator.produce(image) == generator.generate(image)


@pytest.mark.asyncio
async def test_produce_applies_cosmetic_delay() -> None:
    generator = PlaceholderGenerator(delay_seconds=0.05)
    t0 = time.monotonic()
    await generator.produce(_image("sort.png"))
    assert time.monotonic() - t0 >= 0.04
