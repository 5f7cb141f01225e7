"""
Official slot relations and the table of relations that may hold together.
"""

from enum import Enum
from typing import Callable, FrozenSet, Iterable, Optional, Set, Tuple


class RelationType(Enum):
    """The closed set of official slot relations."""
    PER_ALTERNATE_NAMES = "per:alternate_names"
    PER_CHARGES = "per:charges"
    PER_DATE_OF_BIRTH = "per:date_of_birth"
    PER_AGE = "per:age"
    PER_COUNTRY_OF_BIRTH = "per:country_of_birth"
    PER_STATE_OR_PROVINCES_OF_BIRTH = "per:stateorprovince_of_birth"
    PER_CITY_OF_BIRTH = "per:city_of_birth"
    PER_ORIGIN = "per:origin"
    PER_DATE_OF_DEATH = "per:date_of_death"
    PER_COUNTRY_OF_DEATH = "per:country_of_death"
    PER_STATE_OR_PROVINCES_OF_DEATH = "per:stateorprovince_of_death"
    PER_CITY_OF_DEATH = "per:city_of_death"
    PER_CAUSE_OF_DEATH = "per:cause_of_death"
    PER_COUNTRIES_OF_RESIDENCE = "per:countries_of_residence"
    PER_STATE_OR_PROVINCES_OF_RESIDENCE = "per:statesorprovinces_of_residence"
    PER_CITIES_OF_RESIDENCE = "per:cities_of_residence"
    PER_SCHOOLS_ATTENDED = "per:schools_attended"
    PER_TITLE = "per:title"
    PER_EMPLOYEE_OF = "per:employee_or_member_of"
    PER_RELIGION = "per:religion"
    PER_SPOUSE = "per:spouse"
    PER_CHILDREN = "per:children"
    PER_PARENTS = "per:parents"
    PER_SIBLINGS = "per:siblings"
    PER_OTHER_FAMILY = "per:other_family"
    ORG_ALTERNATE_NAMES = "org:alternate_names"
    ORG_POLITICAL_RELIGIOUS_AFFILIATION = "org:political_religious_affiliation"
    ORG_TOP_MEMBERS_PER_EMPLOYEES = "org:top_members_employees"
    ORG_NUMBER_OF_EMPLOYEES_MEMBERS = "org:number_of_employees_members"
    ORG_MEMBERS = "org:members"
    ORG_MEMBER_OF = "org:member_of"
    ORG_SUBSIDIARIES = "org:subsidiaries"
    ORG_PARENTS = "org:parents"
    ORG_FOUNDED_BY = "org:founded_by"
    ORG_DATE_FOUNDED = "org:date_founded"
    ORG_DATE_DISSOLVED = "org:date_dissolved"
    ORG_COUNTRY_OF_HEADQUARTERS = "org:country_of_headquarters"
    ORG_STATE_OR_PROVINCE_OF_HEADQUARTERS = "org:stateorprovince_of_headquarters"
    ORG_CITY_OF_HEADQUARTERS = "org:city_of_headquarters"
    ORG_SHAREHOLDERS = "org:shareholders"
    ORG_WEBSITE = "org:website"

    @classmethod
    def from_name(cls, name: str) -> Optional["RelationType"]:
        """Resolve an official relation from its name; None for unofficial relations."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


# Distinct relations that can hold between the same entity and slot value.
_DEFAULT_COMPATIBLE_PAIRS = [
    (RelationType.PER_CITY_OF_BIRTH, RelationType.PER_CITIES_OF_RESIDENCE),
    (RelationType.PER_CITY_OF_DEATH, RelationType.PER_CITIES_OF_RESIDENCE),
    (RelationType.PER_CITY_OF_BIRTH, RelationType.PER_CITY_OF_DEATH),
    (RelationType.PER_STATE_OR_PROVINCES_OF_BIRTH, RelationType.PER_STATE_OR_PROVINCES_OF_RESIDENCE),
    (RelationType.PER_STATE_OR_PROVINCES_OF_DEATH, RelationType.PER_STATE_OR_PROVINCES_OF_RESIDENCE),
    (RelationType.PER_STATE_OR_PROVINCES_OF_BIRTH, RelationType.PER_STATE_OR_PROVINCES_OF_DEATH),
    (RelationType.PER_COUNTRY_OF_BIRTH, RelationType.PER_COUNTRIES_OF_RESIDENCE),
    (RelationType.PER_COUNTRY_OF_DEATH, RelationType.PER_COUNTRIES_OF_RESIDENCE),
    (RelationType.PER_COUNTRY_OF_BIRTH, RelationType.PER_COUNTRY_OF_DEATH),
    (RelationType.PER_COUNTRY_OF_BIRTH, RelationType.PER_ORIGIN),
    (RelationType.PER_COUNTRIES_OF_RESIDENCE, RelationType.PER_ORIGIN),
    (RelationType.PER_EMPLOYEE_OF, RelationType.PER_SCHOOLS_ATTENDED),
    (RelationType.PER_SIBLINGS, RelationType.PER_OTHER_FAMILY),
    (RelationType.PER_SPOUSE, RelationType.PER_OTHER_FAMILY),
    (RelationType.ORG_TOP_MEMBERS_PER_EMPLOYEES, RelationType.ORG_FOUNDED_BY),
    (RelationType.ORG_TOP_MEMBERS_PER_EMPLOYEES, RelationType.ORG_SHAREHOLDERS),
    (RelationType.ORG_FOUNDED_BY, RelationType.ORG_SHAREHOLDERS),
    (RelationType.ORG_MEMBER_OF, RelationType.ORG_PARENTS),
    (RelationType.ORG_MEMBERS, RelationType.ORG_SUBSIDIARIES),
    (RelationType.ORG_MEMBERS, RelationType.ORG_SHAREHOLDERS),
    (RelationType.ORG_DATE_FOUNDED, RelationType.ORG_DATE_DISSOLVED),
]


class CompatibilityTable:
    """Symmetric table of official relations that plausibly co-occur on one slot value."""

    def __init__(self, pairs: Iterable[Tuple[RelationType, RelationType]] = _DEFAULT_COMPATIBLE_PAIRS):
        self.pairs: Set[FrozenSet[RelationType]] = set()
        for first, second in pairs:
            self.add(first, second)

    def add(self, first: RelationType, second: RelationType):
        self.pairs.add(frozenset((first, second)))

    def compatible(self, first: RelationType, second: RelationType) -> bool:
        return first == second or frozenset((first, second)) in self.pairs

    def __call__(self, first: str, second: str) -> bool:
        """Predicate over relation names.

        Unofficial relations never contradict anything; two official
        relations co-occur only if they are identical or listed in the table.
        """
        if first == second:
            return True
        first_type = RelationType.from_name(first)
        second_type = RelationType.from_name(second)
        if first_type is None or second_type is None:
            return True
        return self.compatible(first_type, second_type)

    def __len__(self) -> int:
        return len(self.pairs)


DEFAULT_COMPATIBILITY = CompatibilityTable()

CooccurrencePredicate = Callable[[str, str], bool]


def plausibly_cooccur(first: str, second: str) -> bool:
    """Default co-occurrence predicate, backed by the default compatibility table."""
    return DEFAULT_COMPATIBILITY(first, second)
