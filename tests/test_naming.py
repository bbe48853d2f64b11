from __future__ import annotations

import unittest

from recordmap import (
    NamingResolver,
    attribute_for_column,
    column_name,
    pluralize,
    to_pascal_case,
    to_snake_case,
)
from tests.record_fixtures import (
    Box,
    Category,
    ClassNamed,
    CustomTable,
    LegacyRow,
    MethodNamed,
    User,
)


class SnakeCaseTests(unittest.TestCase):
    def test_splits_only_at_lower_to_upper_transitions(self) -> None:
        self.assertEqual(to_snake_case("CreatedAt"), "created_at")
        self.assertEqual(to_snake_case("UserID"), "user_id")
        self.assertEqual(to_snake_case("HTTPServer"), "httpserver")
        self.assertEqual(to_snake_case("Address2Line"), "address2_line")
        self.assertEqual(to_snake_case("Id"), "id")

    def test_snake_case_input_is_unchanged(self) -> None:
        self.assertEqual(to_snake_case("billing_address_id"), "billing_address_id")

    def test_is_idempotent_on_own_output(self) -> None:
        for name in ("CreatedAt", "UserID", "HTTPServer", "BillingAddressId", "x"):
            once = to_snake_case(name)
            self.assertEqual(to_snake_case(once), once)

    def test_pascal_case_reverses_unambiguous_identifiers(self) -> None:
        for name in ("CreatedAt", "BillingAddressId", "Name", "UpdatedAt"):
            self.assertEqual(to_pascal_case(to_snake_case(name)), name)

    def test_pascal_case_ignores_empty_parts(self) -> None:
        self.assertEqual(to_pascal_case("user__id_"), "UserId")


class ColumnNameTests(unittest.TestCase):
    def test_column_name_is_snake_case_of_identifier(self) -> None:
        self.assertEqual(column_name("BillingAddressId"), "billing_address_id")
        self.assertEqual(column_name("updated_at"), "updated_at")

    def test_attribute_for_column_accepts_identifier_or_column(self) -> None:
        self.assertEqual(attribute_for_column(User, "billing_address_id"), "billing_address_id")
        self.assertEqual(attribute_for_column(User, "BillingAddressId"), "billing_address_id")
        self.assertEqual(attribute_for_column(User, "UpdatedAt"), "updated_at")
        self.assertEqual(attribute_for_column(LegacyRow, "updated_at"), "UpdatedAt")
        self.assertEqual(attribute_for_column(LegacyRow, "Name"), "Name")

    def test_attribute_for_unknown_or_unexported_column(self) -> None:
        self.assertIsNone(attribute_for_column(User, "missing"))
        self.assertIsNone(attribute_for_column(User, "_token"))


class PluralizeTests(unittest.TestCase):
    def test_rules_apply_in_order(self) -> None:
        cases = {
            "category": "categories",
            "box": "boxes",
            "day": "days",
            "holiday": "holidays",
            "bus": "buses",
            "class": "classes",
            "church": "churches",
            "dish": "dishes",
            "user": "users",
        }
        for singular, plural in cases.items():
            with self.subTest(singular=singular):
                self.assertEqual(pluralize(singular), plural)


class TableNameTests(unittest.TestCase):
    def test_inferred_names_are_pluralized_by_default(self) -> None:
        naming = NamingResolver()
        self.assertEqual(naming.table_name(User), "users")
        self.assertEqual(naming.table_name(Category()), "categories")
        self.assertEqual(naming.table_name(Box), "boxes")

    def test_singular_names_when_pluralization_disabled(self) -> None:
        naming = NamingResolver(pluralize_tables=False)
        self.assertEqual(naming.table_name(Category), "category")

    def test_override_attribute_is_used_verbatim(self) -> None:
        naming = NamingResolver()
        self.assertEqual(naming.table_name(CustomTable), "custom_things")
        self.assertEqual(naming.table_name(CustomTable()), "custom_things")

    def test_table_name_method_on_instance(self) -> None:
        naming = NamingResolver()
        self.assertEqual(naming.table_name(MethodNamed(tenant="beta")), "beta_records")
        # Instance methods cannot be called without a record.
        self.assertEqual(naming.table_name(MethodNamed), "method_nameds")

    def test_table_name_classmethod_on_class(self) -> None:
        self.assertEqual(NamingResolver().table_name(ClassNamed), "named_by_class")

    def test_lists_resolve_through_element_type(self) -> None:
        naming = NamingResolver()
        self.assertEqual(naming.table_name([Category(), Category()]), "categories")
        with self.assertRaises(TypeError):
            naming.table_name([])


if __name__ == "__main__":
    unittest.main()
