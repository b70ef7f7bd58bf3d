"""
Tests for the Pydantic schemas.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from petclinic_core.schemas import (
    OwnerSchema,
    Page,
    PetSchema,
    PetTypeSchema,
    SpecialtySchema,
    VetSchema,
    VisitSchema,
)


def make_owner(**overrides) -> OwnerSchema:
    data = {
        "first_name": "George",
        "last_name": "Franklin",
        "address": "110 W. Liberty St.",
        "city": "Madison",
        "telephone": "6085551023",
    }
    data.update(overrides)
    return OwnerSchema(**data)


class TestPage:
    """Test cases for the Page schema."""

    def test_total_pages(self):
        """Test total pages rounds up."""
        page = Page(content=[1, 2], page_number=0, page_size=10, total_elements=25)

        assert page.total_pages == 3

    def test_total_pages_without_page_size(self):
        """Test an unpaged result counts as one page."""
        page = Page(content=[], page_number=0, page_size=0, total_elements=0)

        assert page.total_pages == 1

    def test_total_is_corrected_upward(self):
        """Test the total never drops below what was observed."""
        page = Page(content=[1, 2, 3], page_number=2, page_size=5, total_elements=4)

        assert page.total_elements == 13
        assert page.total_pages == 3

    def test_total_is_not_lowered(self):
        """Test a larger reported total is kept."""
        page = Page(content=[1, 2], page_number=0, page_size=2, total_elements=9)

        assert page.total_elements == 9

    def test_empty_page_keeps_total(self):
        """Test an empty page past the end keeps the reported total."""
        page = Page(content=[], page_number=5, page_size=10, total_elements=25)

        assert page.is_empty()
        assert page.total_elements == 25

    def test_of(self):
        """Test wrapping an unpaged list."""
        page = Page.of(["a", "b", "c"])

        assert len(page) == 3
        assert page.page_size == 3
        assert page.total_elements == 3
        assert page.total_pages == 1

    def test_offset(self):
        """Test offset of a page."""
        assert Page(page_number=3, page_size=5).offset == 15

    def test_serialization_includes_total_pages(self):
        """Test total pages is part of the serialized page."""
        data = Page(content=[1], page_number=0, page_size=1, total_elements=2).model_dump()

        assert data["total_pages"] == 2

    def test_negative_values_rejected(self):
        """Test negative page numbers are rejected."""
        with pytest.raises(ValidationError):
            Page(page_number=-1, page_size=10)

    def test_typed_content(self):
        """Test parametrized pages validate their content."""
        page = Page[SpecialtySchema](content=[{"id": 1, "name": "radiology"}])

        assert page.content[0] == SpecialtySchema(id=1, name="radiology")


class TestOwnerSchema:
    """Test cases for the owner, pet and visit schemas."""

    def test_telephone_must_be_digits(self):
        """Test the telephone validation."""
        with pytest.raises(ValidationError):
            make_owner(telephone="608-555-1023")
        with pytest.raises(ValidationError):
            make_owner(telephone="60855510234")

    def test_telephone_is_stripped(self):
        """Test surrounding whitespace is removed."""
        assert make_owner(telephone=" 6085551023 ").telephone == "6085551023"

    def test_is_new(self):
        """Test owners without id are new."""
        assert make_owner().is_new()
        assert not make_owner(id=1).is_new()

    def test_get_pet(self):
        """Test finding a pet by id or by name."""
        leo = PetSchema(id=1, name="Leo", type=PetTypeSchema(id=1, name="cat"))
        bowser = PetSchema(name="Bowser")
        owner = make_owner(pets=[leo, bowser])

        assert owner.get_pet(1) == leo
        assert owner.get_pet("leo") == leo
        assert owner.get_pet("BOWSER") == bowser
        assert owner.get_pet("bowser", ignore_new=True) is None
        assert owner.get_pet(99) is None

    def test_nested_from_rows(self):
        """Test nested rows with ISO dates are parsed."""
        pet = PetSchema(
            id=7,
            name="Samantha",
            birth_date="2012-09-04",
            visits=[{"id": 4, "pet_id": 7, "date": "2013-01-04", "description": " spayed "}],
        )

        assert pet.birth_date == date(2012, 9, 4)
        assert pet.visits[0].date == date(2013, 1, 4)
        assert pet.visits[0].description == "spayed"

    def test_add_visit(self):
        """Test adding a visit to a pet."""
        pet = PetSchema(name="Leo")
        pet.add_visit(VisitSchema(description="rabies shot"))

        assert len(pet.visits) == 1


class TestVetSchema:
    """Test cases for the vet schema."""

    def test_specialties_sorted_by_name(self):
        """Test specialties are kept in name order."""
        vet = VetSchema(
            id=3,
            first_name="Linda",
            last_name="Douglas",
            specialties=[
                SpecialtySchema(id=2, name="surgery"),
                SpecialtySchema(id=3, name="dentistry"),
            ],
        )

        assert [s.name for s in vet.specialties] == ["dentistry", "surgery"]
        assert vet.nr_of_specialties == 2

    def test_add_specialty(self):
        """Test added specialties keep the order."""
        vet = VetSchema(first_name="Helen", last_name="Leary")
        vet.add_specialty(SpecialtySchema(name="surgery"))
        vet.add_specialty(SpecialtySchema(name="radiology"))

        assert [s.name for s in vet.specialties] == ["radiology", "surgery"]
        assert vet.model_dump()["nr_of_specialties"] == 2
