#!/usr/bin/env python3
"""
A small arithmetic parser written once against the builder protocol.

This example demonstrates:
- A producer that never names a concrete representation
- Building the same input as nested lists and as frozen objects
- Walking the result back out to evaluate it
"""

import re
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from treeprotocol import (
    ListBuilder,
    NodeSchema,
    ObjectBuilder,
    make_bounds,
    make_finish,
    make_finish_relations,
    to_literal,
    walk,
    with_builder,
)

TOKEN = re.compile(r"\s*(?:(\d+)|(.))")


def tokenize(text):
    tokens = []
    for match in TOKEN.finditer(text):
        number, op = match.groups()
        start = match.start(1) if number else match.start(2)
        tokens.append((number or op, start, match.end()))
    return tokens


def parse(builder, text):
    """Parse sums and products of integers into builder's representation."""
    tokens = tokenize(text)
    position = 0

    def peek():
        return tokens[position][0] if position < len(tokens) else None

    def primary():
        nonlocal position
        token, start, end = tokens[position]
        position += 1
        return make_finish(builder, "literal", {"value": int(token), "bounds": make_bounds(start, end)})

    def binary(operand, operators):
        nonlocal position
        left = operand()
        while peek() in operators:
            op = peek()
            start = tokens[position][1]
            position += 1
            right = operand()
            left = make_finish_relations(builder, "operator", {"op": op, "bounds": make_bounds(start, start + 1)}, [
                ("operand", [left, right]),
            ])
        return left

    def product():
        return binary(primary, ("*",))

    return binary(product, ("+", "-"))


def evaluate(recurse, relation, relation_args, node, kind, relations, initargs):
    if kind == "literal":
        return initargs["value"]
    left, right = recurse()[0]
    return {"+": left + right, "-": left - right, "*": left * right}[initargs["op"]]


def main():
    text = "1 + 2 * 3 - 4"

    list_builder = ListBuilder()
    tree = with_builder(list_builder, lambda b: parse(b, text))
    print("As lists:  ", to_literal(tree))
    print("Evaluates: ", walk(list_builder, evaluate, tree))

    object_builder = ObjectBuilder([
        NodeSchema("literal", required={"value"}),
        NodeSchema("operator", required={"op"}, relations={"operand": "*"}),
    ])
    tree = with_builder(object_builder, lambda b: parse(b, text))
    print("As objects:", tree.kind, tree.attrs)
    print("Evaluates: ", walk(object_builder, evaluate, tree))


if __name__ == "__main__":
    main()
