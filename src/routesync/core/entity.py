# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class CoreData:
    """Provide basic dunder implementations for core entities (route tables, routes, decisions, outcomes).

    Entities are value objects built from a single read of cloud state, so equality and hashing are based on
    their attributes.
    """

    def __eq__(self, other) -> bool:
        return type(other) is type(self) and self.__dict__ == other.__dict__

    def __hash__(self) -> int:
        return hash(tuple(sorted((name, _hashable(value)) for name, value in self.__dict__.items())))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({','.join([f'{name}={repr(value)}' for name, value in self.__dict__.items()])})"

    def __str__(self) -> str:
        return self.__repr__()


def _hashable(value):
    if isinstance(value, list):
        return tuple(_hashable(v) for v in value)
    if isinstance(value, dict):
        return tuple(sorted((k, _hashable(v)) for k, v in value.items()))
    return value
