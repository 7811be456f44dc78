# Overview: Pytest coverage for owners/clients and intermediaries.

import pytest

from dealership.errors import NotFoundError, ReferenceInUseError, ValidationError
from dealership.services import intermediary_service, people_service, sale_service


class TestPeople:
    def test_create_and_list_by_type(self, db_session, owner, buyer):
        assert {p["id"] for p in people_service.list_people()} == {owner["id"], buyer["id"]}
        assert [p["id"] for p in people_service.list_people(person_type="OWNER")] == [owner["id"]]
        assert [p["id"] for p in people_service.list_people(person_type="CLIENT")] == [buyer["id"]]

    def test_invalid_type_rejected(self, db_session):
        with pytest.raises(ValidationError) as excinfo:
            people_service.create_person({"name": "Ana", "phone": "1199", "type": "SUPPLIER"})
        assert excinfo.value.field == "type"

    def test_missing_phone_rejected(self, db_session):
        with pytest.raises(ValidationError) as excinfo:
            people_service.create_person({"name": "Ana", "type": "CLIENT"})
        assert excinfo.value.field == "phone"

    def test_blank_name_rejected(self, db_session):
        with pytest.raises(ValidationError) as excinfo:
            people_service.create_person({"name": "   ", "phone": "1199", "type": "CLIENT"})
        assert excinfo.value.field == "name"

    def test_update(self, db_session, owner):
        updated = people_service.update_person(owner["id"], {"phone": "11900000000"})
        assert updated["phone"] == "11900000000"
        assert updated["name"] == owner["name"]

    def test_get_missing(self, db_session):
        with pytest.raises(NotFoundError):
            people_service.get_person(9999)


class TestDocumentLookup:
    @pytest.mark.parametrize("query", ["123.456.789-00", "12345678900", " 123456789-00 "])
    def test_formatting_ignored(self, db_session, owner, query):
        found = people_service.find_person_by_document(query)
        assert found is not None
        assert found["id"] == owner["id"]

    def test_no_match(self, db_session, owner):
        assert people_service.find_person_by_document("999.999.999-99") is None

    def test_too_short_query(self, db_session, owner):
        assert people_service.find_person_by_document("12") is None
        assert people_service.find_person_by_document("") is None


class TestDeletePerson:
    def test_unreferenced_person_deleted(self, db_session, buyer):
        people_service.delete_person(buyer["id"])
        with pytest.raises(NotFoundError):
            people_service.get_person(buyer["id"])

    def test_owner_of_vehicle_kept(self, db_session, owner, vehicle):
        with pytest.raises(ReferenceInUseError) as excinfo:
            people_service.delete_person(owner["id"])
        assert excinfo.value.details["vehicle_id"] == vehicle["id"]
        assert people_service.get_person(owner["id"])["id"] == owner["id"]

    def test_buyer_of_vehicle_kept(self, db_session, buyer, vehicle):
        sale_service.sell_vehicle(vehicle["id"], {"sale_price_cents": 60000, "buyer_id": buyer["id"]})
        with pytest.raises(ReferenceInUseError):
            people_service.delete_person(buyer["id"])


class TestIntermediaries:
    def test_create_parses_birth_date(self, db_session, intermediary):
        assert intermediary["birth_date"] == "1985-04-12"
        assert [i["id"] for i in intermediary_service.list_intermediaries()] == [intermediary["id"]]

    def test_invalid_birth_date(self, db_session):
        with pytest.raises(ValidationError) as excinfo:
            intermediary_service.create_intermediary({"name": "X", "document": "1", "birth_date": "12/04/1985"})
        assert excinfo.value.field == "birth_date"

    def test_update_and_get(self, db_session, intermediary):
        intermediary_service.update_intermediary(intermediary["id"], {"photo_ref": "photos/pedro.jpg"})
        assert intermediary_service.get_intermediary(intermediary["id"])["photo_ref"] == "photos/pedro.jpg"

    def test_delete_unreferenced(self, db_session, intermediary):
        intermediary_service.delete_intermediary(intermediary["id"])
        assert intermediary_service.list_intermediaries() == []

    def test_delete_referenced_rejected(self, db_session, intermediary, vehicle):
        sale_service.sell_vehicle(vehicle["id"], {
            "sale_price_cents": 60000,
            "intermediary_id": intermediary["id"],
            "intermediary_commission_cents": 1500,
        })
        with pytest.raises(ReferenceInUseError):
            intermediary_service.delete_intermediary(intermediary["id"])

    def test_delete_missing(self, db_session):
        with pytest.raises(NotFoundError):
            intermediary_service.delete_intermediary(9999)
