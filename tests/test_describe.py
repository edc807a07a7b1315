from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from pydantic import BaseModel, Field

from sqeel.config import SqeelSettings
from sqeel.describe import FieldSpec, TableBuilder, describe_table, iter_fields
from sqeel.errors import (
    DuplicatePrimaryKey,
    EmptySqlType,
    InvalidTagKey,
    MissingPrimaryKey,
    SchemaError,
)
from sqeel.grammar import TagSpec


@dataclass
class User:
    ID: int = field(metadata={"sqeel": "type:INTEGER,primary"})
    Name: str = field(metadata={"sqeel": "type:VARCHAR(64),attrs:NOT NULL"})
    Email: str = field(metadata={"sqeel": "type:VARCHAR(128),unique"})


class UserModel(BaseModel):
    ID: int = Field(json_schema_extra={"sqeel": "type:INTEGER,primary"})
    Name: str = Field(json_schema_extra={"sqeel": "type:VARCHAR(64),attrs:NOT NULL"})
    Email: str | None = Field(default=None, json_schema_extra={"sqeel": "type:VARCHAR(128),unique"})


USERS_CREATE = (
    "CREATE TABLE users (\n"
    "ID INTEGER,\n"
    "Name VARCHAR(64) NOT NULL,\n"
    "Email VARCHAR(128),\n"
    "PRIMARY KEY (ID),\n"
    "UNIQUE KEY (Email));"
)


def test_describe_dataclass() -> None:
    td = describe_table("users", User, {"Email": "emails.address"})

    assert td.name == "users"
    assert td.key_names() == ["ID", "Name", "Email"]
    assert td.primary_index == 0
    assert td.primary_key().is_primary is True
    assert td.keys[0].source_type == "int"
    assert td.keys[0].raw_tag == "type:INTEGER,primary"
    assert td.keys[2].is_unique is True
    assert td.foreign_keys == (("Email", "emails.address"),)
    assert td.foreign_key_map() == {"Email": "emails.address"}
    assert td.create_statement() == USERS_CREATE


def test_describe_dataclass_instance() -> None:
    td = describe_table("users", User(ID=1, Name="n", Email="e"))
    assert td.create_statement() == USERS_CREATE


def test_describe_pydantic_model_class_and_instance() -> None:
    by_class = describe_table("users", UserModel)
    by_instance = describe_table("users", UserModel(ID=1, Name="n"))

    assert by_class.create_statement() == USERS_CREATE
    assert by_class == by_instance
    assert by_class.keys[2].source_type == "str | None"


def test_describe_triples() -> None:
    td = describe_table(
        "users",
        [
            FieldSpec("ID", "int", "type:INTEGER,primary"),
            ("Name", "str", "type:VARCHAR(64),attrs:NOT NULL"),
            ("Email", "str", "type:VARCHAR(128),unique"),
        ],
    )
    assert td.create_statement() == USERS_CREATE


def test_missing_primary_key() -> None:
    with pytest.raises(MissingPrimaryKey):
        describe_table("t", [("A", "int", "type:INTEGER"), ("B", "str", "type:TEXT")])


def test_invalid_tag_key_carries_field() -> None:
    with pytest.raises(InvalidTagKey) as ei:
        describe_table("t", [("ID", "int", "type:INTEGER,primary"), ("Body", "str", "type:TEXT,bogus")])
    assert ei.value.key == "bogus"
    assert ei.value.field == "Body"
    assert "Body" in str(ei.value)


def test_empty_type_rejected_by_default() -> None:
    with pytest.raises(EmptySqlType) as ei:
        describe_table("t", [("ID", "int", "type:INTEGER,primary"), ("Cache", "dict", "")])
    assert ei.value.field == "Cache"


def test_empty_type_skipped_when_allowed() -> None:
    td = describe_table(
        "t",
        [("ID", "int", "type:INTEGER,primary"), ("Cache", "dict", "")],
        settings=SqeelSettings(allow_empty_type=True),
    )
    assert td.key_names() == ["ID"]


@dataclass
class Untagged:
    ID: int = field(metadata={"sqeel": "type:INTEGER,primary"})
    scratch: list = field(default_factory=list)


def test_dataclass_field_without_metadata_is_empty_type() -> None:
    with pytest.raises(EmptySqlType):
        describe_table("t", Untagged)


def test_duplicate_primary_rejected_by_default() -> None:
    with pytest.raises(DuplicatePrimaryKey) as ei:
        describe_table("t", [("A", "int", "type:INTEGER,primary"), ("B", "int", "type:INTEGER,primary")])
    assert ei.value.fields == ("A", "B")


def test_duplicate_primary_last_wins_when_lenient() -> None:
    td = describe_table(
        "t",
        [("A", "int", "type:INTEGER,primary"), ("B", "int", "type:INTEGER,primary")],
        settings=SqeelSettings(strict_primary=False),
    )
    assert td.primary_index == 1
    assert td.primary_key().source_name == "B"
    assert td.keys[0].is_primary is False


def test_custom_metadata_key() -> None:
    @dataclass
    class Row:
        ID: int = field(metadata={"db": "type:INTEGER,primary"})

    td = describe_table("rows", Row, settings=SqeelSettings(metadata_key="db"))
    assert td.key_names() == ["ID"]


@pytest.mark.parametrize("record", [42, "ID", {"ID": "type:INTEGER"}])
def test_unsupported_record_surface(record: object) -> None:
    with pytest.raises(SchemaError):
        describe_table("t", record)


def test_bad_triple_rejected() -> None:
    with pytest.raises(SchemaError, match="3-tuple"):
        list(iter_fields([("ID", "type:INTEGER")]))


def test_empty_source_name_rejected() -> None:
    with pytest.raises(SchemaError, match="non-empty"):
        describe_table("t", [("", "int", "type:INTEGER,primary")])


def test_table_builder_matches_describe() -> None:
    td = (
        TableBuilder("users")
        .add_field("ID", "int", "type:INTEGER,primary")
        .add_field("Name", "str", "type:VARCHAR(64),attrs:NOT NULL")
        .add_field("Email", "str", "type:VARCHAR(128),unique")
        .build()
    )
    assert td == describe_table("users", User)
    assert td.drop_statement() == "DROP TABLE IF EXISTS users;"
    assert td.exists_statement() == "SHOW TABLES LIKE 'users';"


def test_table_builder_missing_primary() -> None:
    with pytest.raises(MissingPrimaryKey):
        TableBuilder("t").add_field("A", "int", "type:INTEGER").build()


def test_table_builder_accepts_tag_spec() -> None:
    td = (
        TableBuilder("users")
        .add_field("ID", "int", TagSpec(type="INTEGER", is_primary=True))
        .add_field("Nick", "str", TagSpec(type="VARCHAR(32)", name_override="nickname", is_unique=True))
        .build()
    )
    assert td.keys[0].raw_tag == "type:INTEGER,primary"
    assert td.keys[1].raw_tag == "type:VARCHAR(32),name:nickname,unique"
    assert td.sql_names() == ["id", "nickname"]


def test_built_description_is_hashable_and_frozen() -> None:
    td = (
        TableBuilder("users", {"Email": "emails.address"})
        .add_field("ID", "int", "type:INTEGER,primary")
        .add_field("Email", "str", "type:VARCHAR(128),unique")
        .build()
    )
    before = td.fingerprint()

    assert hash(td) == hash(td.model_copy())
    with pytest.raises(TypeError):
        td.foreign_key_map()["Email"] = "other.address"  # type: ignore[index]
    assert td.fingerprint() == before
