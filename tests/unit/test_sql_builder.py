"""Tests for the SQL statement builders."""

import pytest

from bureaucrat.exceptions import (
    ClauseAlreadySetError,
    FromNotSetError,
    IntoNotSetError,
    InvalidLimitError,
    NoAttributionsSetError,
    NoFieldsSetError,
    NoWhereRestrictionsError,
    NullNotAcceptedError,
    SQLBuilderError,
    TableNotSetError,
)
from bureaucrat.sql.builder import Delete, Insert, Select, Update, quote_identifier


class TestQuoteIdentifier:
    """Tests for identifier quoting."""

    def test_plain_name(self):
        assert quote_identifier("user") == '"user"'

    def test_embedded_quotes_are_doubled(self):
        assert quote_identifier('we"ird') == '"we""ird"'


class TestSelect:
    """Tests for SELECT rendering."""

    def test_select_all(self):
        rendered = Select().from_("user").render()
        assert rendered.sql == 'SELECT *\nFROM "user"'
        assert rendered.params == ()

    def test_projection(self):
        rendered = Select().from_("user").select("id", "first_name").render()
        assert rendered.sql == 'SELECT "id", "first_name"\nFROM "user"'

    def test_where_and_limit_params_in_clause_order(self):
        rendered = Select().from_("user").where("id", 1).where("last_name", "Adams").limit(5).render()
        assert rendered.sql == (
            'SELECT *\nFROM "user"\nWHERE "id" = ? AND "last_name" = ?\nLIMIT ?'
        )
        assert rendered.params == (1, "Adams", 5)

    def test_limit_zero_is_rendered(self):
        rendered = Select().from_("user").limit(0).render()
        assert rendered.sql.endswith("LIMIT ?")
        assert rendered.params == (0,)

    def test_from_not_set(self):
        with pytest.raises(FromNotSetError) as exc_info:
            Select().where("id", 1).render()
        assert "from_" in str(exc_info.value)

    def test_from_set_twice(self):
        with pytest.raises(ClauseAlreadySetError) as exc_info:
            Select().from_("user").from_("feature")
        assert exc_info.value.clause == "FROM"

    def test_limit_set_twice(self):
        with pytest.raises(ClauseAlreadySetError):
            Select().from_("user").limit(1).limit(2)

    @pytest.mark.parametrize("limit", [-1, 1.5, "3", True])
    def test_invalid_limit(self, limit):
        with pytest.raises(InvalidLimitError):
            Select().from_("user").limit(limit)

    def test_null_rejected_by_default(self):
        with pytest.raises(NullNotAcceptedError) as exc_info:
            Select().from_("user").where("middle_name", None)
        assert exc_info.value.column == "middle_name"

    def test_null_accepted_renders_is_null(self):
        rendered = Select().from_("user").where("middle_name", None, accept_null=True).render()
        assert rendered.sql == 'SELECT *\nFROM "user"\nWHERE "middle_name" IS NULL'
        assert rendered.params == ()

    def test_builders_are_immutable(self):
        base = Select().from_("user")
        restricted = base.where("id", 1)
        assert base.render().sql == 'SELECT *\nFROM "user"'
        assert restricted.render().params == (1,)

    def test_query_hands_off_to_store(self, make_store):
        store = make_store()
        Select().from_("user").limit(1).query(store)
        assert store.queries == [('SELECT *\nFROM "user"\nLIMIT ?', (1,))]


class TestInsert:
    """Tests for INSERT rendering."""

    def test_insert(self):
        rendered = Insert().into("user").set("first_name", "Douglas").set("last_name", "Adams").render()
        assert rendered.sql == 'INSERT INTO "user"("first_name", "last_name") VALUES (?, ?)'
        assert rendered.params == ("Douglas", "Adams")

    def test_insert_null_value(self):
        rendered = Insert().into("user").set("middle_name", None).render()
        assert rendered.params == (None,)

    def test_into_not_set(self):
        with pytest.raises(IntoNotSetError):
            Insert().set("first_name", "Douglas").render()

    def test_into_set_twice(self):
        with pytest.raises(ClauseAlreadySetError):
            Insert().into("user").into("feature")

    def test_no_fields(self):
        with pytest.raises(NoFieldsSetError):
            Insert().into("user").render()

    def test_execute_reports_store_result(self, make_store):
        store = make_store(last_inserted_id=7)
        result = Insert().into("user").set("first_name", "Douglas").execute(store)
        assert result.affected_row_count == 1
        assert result.last_inserted_id == 7
        assert store.statements[0][1] == ("Douglas",)


class TestUpdate:
    """Tests for UPDATE rendering."""

    def test_update_params_set_then_where(self):
        rendered = (
            Update()
            .table("user")
            .set("first_name", "Rick")
            .set("middle_name", None)
            .where("id", 1)
            .render()
        )
        assert rendered.sql == (
            'UPDATE "user"\nSET "first_name" = ?, "middle_name" = ?\nWHERE "id" = ?'
        )
        assert rendered.params == ("Rick", None, 1)

    def test_table_not_set(self):
        with pytest.raises(TableNotSetError):
            Update().set("first_name", "Rick").where("id", 1).render()

    def test_no_attributions(self):
        with pytest.raises(NoAttributionsSetError):
            Update().table("user").where("id", 1).render()

    def test_no_where(self):
        with pytest.raises(NoWhereRestrictionsError):
            Update().table("user").set("first_name", "Rick").render()


class TestDelete:
    """Tests for DELETE rendering."""

    def test_delete(self):
        rendered = Delete().table("user").where("id", 3).render()
        assert rendered.sql == 'DELETE FROM "user"\nWHERE "id" = ?'
        assert rendered.params == (3,)

    def test_table_not_set(self):
        with pytest.raises(TableNotSetError):
            Delete().where("id", 3).render()

    def test_no_where(self):
        with pytest.raises(NoWhereRestrictionsError):
            Delete().table("user").render()

    def test_all_builder_errors_share_a_base(self):
        with pytest.raises(SQLBuilderError):
            Delete().render()
