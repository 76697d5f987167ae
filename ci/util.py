# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import functools
import os
import pathlib

import yaml


def existing_file(path):
    if isinstance(path, pathlib.Path):
        is_file = path.is_file()
    else:
        is_file = os.path.isfile(path)
    if not is_file:
        raise ValueError(f'not an existing file: {path}')
    return path


def not_empty(value):
    if not value or len(value) == 0:
        raise ValueError('passed value must not be empty')
    return value


def not_none(value):
    if value is None:
        raise ValueError('passed value must not be None')
    return value


def parse_yaml_file(path, max_elements_count=100000):
    with open(path) as f:
        parsed = yaml.load(f, Loader=yaml.SafeLoader)
        # mitigate yaml bomb
        _count_elements(parsed, max_elements_count=max_elements_count)
        return parsed


def _count_elements(value, count=0, max_elements_count=100000):
    '''
    recursively counts elements contained in the given value. Before each recursion step,
    the amount of encountered elements is checked against a maximum allowed elements count.
    If said threshold is exceeded, recursion is aborted and a `ValueError` is raised.

    This function is intended to be used as a mitigation against "Billion laughs attack"
    (https://en.wikipedia.org/wiki/Billion_laughs_attack).

    @param value: typically a dict or a list. Other types will yield a count of 1
    '''
    if count > max_elements_count:
        raise ValueError('dict too large')

    if not isinstance(value, dict):
        if isinstance(value, list):
            leng = 0
            for e in value:
                leng += _count_elements(
                    e,
                    count=count+leng,
                    max_elements_count=max_elements_count,
                )
            return leng
        else:
            return 1

    leng = 0

    for value in value.values():
        leng += _count_elements(
            value,
            count=count+leng,
            max_elements_count=max_elements_count,
        )

    return leng


def merge_dicts(base: dict, *other: dict):
    '''
    merges copies of the given dict instances and returns the merge result.
    The arguments remain unmodified. However, it must be possible to copy them
    using `copy.deepcopy`.

    Merging is done using the `deepmerge` module. In case of merge conflicts, values from
    `other` overwrite values from `base` (later dicts win).
    '''
    not_none(base)
    not_empty(other)

    from deepmerge import Merger

    strategy_cfg = [(dict, ['merge'])]
    merger = Merger(strategy_cfg, ['override'], ['override'])

    from copy import deepcopy

    return functools.reduce(
        lambda b, o: merger.merge(b, deepcopy(o)),
        [base, *other],
        {},
    )
