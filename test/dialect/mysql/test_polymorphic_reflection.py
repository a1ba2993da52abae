from sqlalchemy.dialects.mysql import base as mysql
from sqlalchemy.testing import eq_
from sqlalchemy.testing import fixtures
from sqlalchemy.testing import is_false
from sqlalchemy.testing import is_true
from sqlalchemy.testing import mock

from polymorpheus import get_polymorphic_triggers
from polymorpheus import get_triggers
from polymorpheus import Trigger
from polymorpheus.ddl import CreatePolymorphicTrigger


def _body(table, action, columns):
    # the Statement column of SHOW TRIGGERS holds the text after
    # FOR EACH ROW
    sql = str(
        CreatePolymorphicTrigger(table, action, columns).compile(
            dialect=mysql.dialect()
        )
    )
    return sql.split("FOR EACH ROW", 1)[1].strip()


def _row(name, event, table, statement):
    return (
        name,
        event,
        table,
        statement,
        "BEFORE",
        None,
        "STRICT_TRANS_TABLES",
        "root@localhost",
        "utf8mb4",
        "utf8mb4_general_ci",
        "utf8mb4_0900_ai_ci",
    )


class TriggerTest(fixtures.TestBase):
    def test_attributes(self):
        trigger = Trigger(
            _row(
                "pfki_pets_dogid_kittyid",
                "INSERT",
                "pets",
                _body("pets", "INSERT", ["dog_id", "kitty_id"]),
            )
        )
        eq_(trigger.name, "pfki_pets_dogid_kittyid")
        eq_(trigger.event, "INSERT")
        eq_(trigger.table, "pets")
        eq_(trigger.timing, "BEFORE")
        eq_(trigger.definer, "root@localhost")
        eq_(trigger.charset, "utf8mb4")
        eq_(trigger.db_collation, "utf8mb4_0900_ai_ci")
        eq_(trigger.columns, ["dog_id", "kitty_id"])
        is_true(trigger.is_polymorphic)

    def test_short_row(self):
        trigger = Trigger(("t1", "INSERT", "pets", "SET NEW.x = 1"))
        eq_(trigger.timing, None)
        eq_(trigger.columns, [])
        is_false(trigger.is_polymorphic)

    def test_quoted_columns(self):
        trigger = Trigger(
            _row(
                "pfku_order_from_to",
                "UPDATE",
                "order",
                "BEGIN IF(IF(NEW.`from` IS NULL, 0, 1) + "
                "IF(NEW.`to` IS NULL, 0, 1)) <> 1 THEN "
                "SET NEW = 'Error'; END IF; END",
            )
        )
        eq_(trigger.columns, ["from", "to"])

    def test_repr(self):
        trigger = Trigger(_row("t1", "INSERT", "pets", ""))
        eq_(repr(trigger), "Trigger('t1', 'BEFORE', 'INSERT')")


class GetTriggersTest(fixtures.TestBase):
    def _bind(self, rows):
        bind = mock.Mock()
        bind.execute.return_value = iter(rows)
        return bind

    def test_get_triggers(self):
        bind = self._bind(
            [
                _row("t1", "INSERT", "pets", ""),
                _row("t2", "UPDATE", "pets", ""),
            ]
        )
        eq_([t.name for t in get_triggers(bind)], ["t1", "t2"])
        eq_(str(bind.execute.mock_calls[0][1][0]), "SHOW TRIGGERS")

    def test_pairs_collapse(self):
        columns = ["dog_id", "kitty_id"]
        bind = self._bind(
            [
                _row(
                    "pfki_pets_dogid_kittyid",
                    "INSERT",
                    "pets",
                    _body("pets", "INSERT", columns),
                ),
                _row(
                    "pfku_pets_dogid_kittyid",
                    "UPDATE",
                    "pets",
                    _body("pets", "UPDATE", columns),
                ),
                _row("audit_pets", "UPDATE", "pets", "SET NEW.x = 1"),
                _row(
                    "pfki_pictures_employeeid_userid",
                    "INSERT",
                    "pictures",
                    _body("pictures", "INSERT", ["user_id", "employee_id"]),
                ),
            ]
        )
        eq_(
            get_polymorphic_triggers(bind),
            [
                ("pets", ["dog_id", "kitty_id"]),
                ("pictures", ["employee_id", "user_id"]),
            ],
        )
