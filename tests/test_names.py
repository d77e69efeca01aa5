import random

import pytest

from taskforge.errors import GenerationExhausted
from taskforge.utils.names import FIRST_NAMES, LAST_NAMES, PersonSynthesizer, slugify

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Đặng", "dang"),
        ("Thảo", "thao"),
        ("Nguyễn", "nguyen"),
        ("Hồ Chí Minh", "ho-chi-minh"),
        ("john.doe+work", "john-doe-work"),
        ("ABC", "abc"),
    ],
)
def test_slugify(value, expected):
    assert slugify(value) == expected


def test_person_email_is_first_dot_last_on_gmail():
    synthesizer = PersonSynthesizer(random.Random(1))
    for _ in range(50):
        person = synthesizer.person()
        last, first = person.full_name.split(" ", 1)
        assert person.email == f"{slugify(first)}.{slugify(last)}@gmail.com"


def test_person_is_deterministic_for_a_seed():
    a = [PersonSynthesizer(random.Random(42)).person() for _ in range(3)]
    b = [PersonSynthesizer(random.Random(42)).person() for _ in range(3)]
    assert a == b


def test_unique_person_skips_excluded_emails(rng):
    synthesizer = PersonSynthesizer(rng)
    excluded = set()
    for _ in range(100):
        person = synthesizer.unique_person(excluded)
        assert person.email.lower() not in excluded
        excluded.add(person.email.lower())


def test_unique_person_compares_lower_case(rng):
    synthesizer = PersonSynthesizer(rng, first_names=("Anh",), last_names=("Lê",))
    with pytest.raises(GenerationExhausted):
        synthesizer.unique_person({"anh.le@gmail.com"}, max_attempts=5)


class CountingSynthesizer(PersonSynthesizer):
    calls = 0

    def person(self):
        self.calls += 1
        return super().person()


@pytest.mark.parametrize("attempts", [1, 7, 100])
def test_unique_person_fails_after_exactly_max_attempts(rng, attempts):
    synthesizer = CountingSynthesizer(rng)
    everything = {
        f"{slugify(first)}.{slugify(last)}@gmail.com" for first in FIRST_NAMES for last in LAST_NAMES
    }
    assert len(everything) == len(FIRST_NAMES) * len(LAST_NAMES)

    with pytest.raises(GenerationExhausted) as info:
        synthesizer.unique_person(everything, max_attempts=attempts)

    assert synthesizer.calls == attempts
    assert info.value.attempts == attempts


def test_default_attempt_bound_is_100(rng):
    synthesizer = CountingSynthesizer(rng, first_names=("Vi",), last_names=("Hồ",))
    with pytest.raises(GenerationExhausted):
        synthesizer.unique_person({"vi.ho@gmail.com"})
    assert synthesizer.calls == 100
