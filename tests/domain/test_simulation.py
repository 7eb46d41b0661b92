from __future__ import annotations

from tests.helpers.secret_store import InMemorySecretStore
from vaulttx.domain.access import AccessPolicy
from vaulttx.domain.operations import Create, Delete, OperationKind, Read, Update
from vaulttx.domain.simulation import DryRunSimulator, simulate_transaction


def test_simulation_never_mutates_the_store() -> None:
    store = InMemorySecretStore.with_secrets({"secret/a": {"v": 1}})

    result = simulate_transaction(
        store,
        [
            Create("secret/new", {"v": 1}),
            Update("secret/a", {"v": 2}),
            Delete("secret/a"),
            Read("secret/new"),
        ],
    )

    assert result.would_succeed is True
    assert store.mutations == []
    assert store.secrets == {"secret/a": {"v": 1}}


def test_update_after_create_in_same_batch_would_succeed() -> None:
    result = simulate_transaction(
        InMemorySecretStore(),
        [Create("secret/a", {"v": 1}), Update("secret/a", {"v": 2})],
    )

    assert result.would_succeed is True
    assert [prediction.path_exists for prediction in result.predictions] == [False, True]
    assert result.predictions[1].existing_payload == {"v": 1}


def test_second_create_points_at_the_earlier_operation() -> None:
    result = simulate_transaction(
        InMemorySecretStore(),
        [Create("secret/a", {"v": 1}), Create("secret/a", {"v": 2})],
    )

    assert result.would_succeed is False
    assert result.would_fail == 1
    assert result.predictions[1].validation_errors == [
        "Cannot create: secret would already exist due to previous operation #1 in this transaction"
    ]


def test_create_over_stored_secret_would_fail() -> None:
    store = InMemorySecretStore.with_secrets({"secret/a": {"v": 1}})

    prediction = DryRunSimulator(store).simulate_operation(Create("secret/a", {"v": 2}))

    assert prediction.would_succeed is False
    assert prediction.path_exists is True
    assert prediction.existing_payload == {"v": 1}
    assert prediction.validation_errors == [
        "Cannot create: secret already exists at the specified path"
    ]


def test_update_of_missing_secret_would_fail() -> None:
    result = simulate_transaction(
        InMemorySecretStore(),
        [Update("secret/a", {"v": 1})],
    )

    assert result.predictions[0].validation_errors == [
        "Cannot update: secret does not exist at the specified path"
    ]


def test_operations_after_a_delete_see_the_path_as_gone() -> None:
    store = InMemorySecretStore.with_secrets({"secret/a": {"v": 1}})

    result = simulate_transaction(
        store,
        [Delete("secret/a"), Delete("secret/a"), Update("secret/a", {"v": 2})],
    )

    first, second, third = result.predictions
    assert first.would_succeed is True
    assert second.validation_errors == [
        "Cannot delete: secret would not exist due to previous operation #1 in this transaction"
    ]
    assert third.validation_errors == [
        "Cannot update: secret would not exist due to previous operation #1 in this transaction"
    ]


def test_delete_of_missing_secret_would_fail() -> None:
    result = simulate_transaction(InMemorySecretStore(), [Delete("secret/ghost")])

    assert result.predictions[0].validation_errors == [
        "Secret does not exist at the specified path"
    ]


def test_failed_prediction_does_not_change_the_overlay() -> None:
    store = InMemorySecretStore.with_secrets({"secret/a": {"v": 1}})

    result = simulate_transaction(
        store,
        [Create("secret/a", {"v": 2}), Update("secret/a", {"v": 3})],
    )

    assert result.predictions[0].would_succeed is False
    assert result.predictions[1].would_succeed is True
    assert result.predictions[1].existing_payload == {"v": 1}


def test_read_of_missing_secret_is_predicted_to_succeed() -> None:
    result = simulate_transaction(InMemorySecretStore(), [Read("secret/missing")])

    prediction = result.predictions[0]
    assert prediction.would_succeed is True
    assert prediction.path_exists is False
    assert prediction.kind is OperationKind.READ


def test_access_denials_become_validation_errors() -> None:
    store = InMemorySecretStore()
    simulator = DryRunSimulator(
        store, access=AccessPolicy(allow_read=False, allowed_paths=("secret/",))
    )

    result = simulator.simulate(
        [Create("secret/a", {"v": 1}), Create("other/b", {"v": 1}), Read("secret/a")]
    )

    assert [prediction.would_succeed for prediction in result.predictions] == [
        True,
        False,
        False,
    ]
    assert result.predictions[1].validation_errors == ["Access to path 'other/b' is not allowed"]
    assert result.predictions[2].validation_errors == ["Read operations are not permitted"]
    assert store.calls_for("read") == ["secret/a"]


def test_malformed_payload_is_reported_with_state() -> None:
    result = simulate_transaction(InMemorySecretStore(), [Create("secret/a", None)])

    prediction = result.predictions[0]
    assert prediction.would_succeed is False
    assert prediction.validation_errors == ["Data is required for create and update operations"]


def test_unreadable_state_is_reported_per_operation() -> None:
    store = InMemorySecretStore(fail_reads={"secret/flaky"})

    result = simulate_transaction(store, [Update("secret/flaky", {"v": 1}), Read("secret/ok")])

    flaky, ok = result.predictions
    assert flaky.would_succeed is False
    assert flaky.validation_errors[0].startswith("Could not read current state:")
    assert ok.would_succeed is True


def test_simulation_reports_dependencies() -> None:
    result = simulate_transaction(
        InMemorySecretStore(),
        [Create("secret/a", {"v": 1}), Read("secret/b"), Update("secret/a", {"v": 2})],
    )

    assert len(result.dependencies) == 1
    dependency = result.dependencies[0]
    assert dependency.path == "secret/a"
    assert dependency.indices == [0, 2]
    assert dependency.conflicts == []


def test_validate_checks_each_operation_in_isolation() -> None:
    store = InMemorySecretStore()
    simulator = DryRunSimulator(store)

    result = simulator.validate([Create("secret/a", {"v": 1}), Update("secret/a", {"v": 2})])

    first, second = result.predictions
    assert first.would_succeed is True
    assert second.would_succeed is False
    assert second.index == 1
    assert second.validation_errors == [
        "Cannot update: secret does not exist at the specified path"
    ]
    assert result.would_succeed is False
    assert [dependency.path for dependency in result.dependencies] == ["secret/a"]
    assert store.mutations == []


def test_validate_can_skip_dependency_analysis() -> None:
    simulator = DryRunSimulator(InMemorySecretStore())

    result = simulator.validate(
        [Create("secret/a", {"v": 1}), Create("secret/a", {"v": 2})],
        check_dependencies=False,
    )

    assert [prediction.would_succeed for prediction in result.predictions] == [True, True]
    assert result.dependencies == []


def test_simulate_operation_sees_only_the_store() -> None:
    store = InMemorySecretStore.with_secrets({"secret/a": {"v": 1}})
    simulator = DryRunSimulator(store)

    prediction = simulator.simulate_operation(Delete("secret/a"))

    assert prediction.would_succeed is True
    assert prediction.path_exists is True
    assert prediction.existing_payload == {"v": 1}
    assert simulator.simulate_operation(Delete("secret/a")).would_succeed is True
    assert store.secrets == {"secret/a": {"v": 1}}
