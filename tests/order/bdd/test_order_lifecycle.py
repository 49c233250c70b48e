"""BDD tests for the administrator-driven order lifecycle."""

from pytest_bdd import scenarios

scenarios("features/order_state_machine.feature")
