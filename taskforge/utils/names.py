"""Synthetic Vietnamese identities with slug-safe gmail addresses."""

import random
import re
import unicodedata
from dataclasses import dataclass
from typing import AbstractSet, Optional, Sequence

from taskforge.errors import GenerationExhausted

FIRST_NAMES = (
    "Anh", "Bình", "Châu", "Dũng", "Hà", "Hương", "Khánh", "Lan", "Minh",
    "Nam", "Ngọc", "Phúc", "Quân", "Thảo", "Trang", "Tuấn", "Vân", "Vi",
)
LAST_NAMES = (
    "Nguyễn", "Trần", "Lê", "Phạm", "Hoàng", "Huỳnh", "Phan", "Vũ", "Đặng",
    "Bùi", "Đỗ", "Hồ", "Ngô",
)
EMAIL_DOMAIN = "gmail.com"
MAX_ATTEMPTS = 100

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")


def slugify(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    # đ/Đ have no decomposition
    stripped = stripped.replace("đ", "d").replace("Đ", "D")
    return _NON_ALNUM.sub("-", stripped).lower()


@dataclass(frozen=True)
class Person:
    full_name: str
    email: str


class PersonSynthesizer:
    def __init__(
            self,
            rng: Optional[random.Random] = None,
            first_names: Sequence[str] = FIRST_NAMES,
            last_names: Sequence[str] = LAST_NAMES,
            domain: str = EMAIL_DOMAIN,
    ):
        self.rng = rng or random.Random()
        self.first_names = first_names
        self.last_names = last_names
        self.domain = domain

    def person(self) -> Person:
        first = self.rng.choice(self.first_names)
        last = self.rng.choice(self.last_names)
        return Person(
            full_name=f"{last} {first}",
            email=f"{slugify(first)}.{slugify(last)}@{self.domain}",
        )

    def unique_person(self, excluded: AbstractSet[str], max_attempts: int = MAX_ATTEMPTS) -> Person:
        """Resample until the lower-cased email is not in ``excluded``.

        Draws at most ``max_attempts`` people, then raises GenerationExhausted.
        """
        for _ in range(max_attempts):
            person = self.person()
            if person.email.lower() not in excluded:
                return person
        raise GenerationExhausted(max_attempts)
