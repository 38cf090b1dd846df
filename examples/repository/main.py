#!/usr/bin/env python3
"""Repository query example using esqly.

Demonstrates:
- @query on repository methods
- String escaping inside author-supplied quotes
- Scalar and string collections
- Repeated placeholders

Usage:
    cd examples/repository
    PYTHONPATH="../../src" uv run python main.py
"""

from __future__ import annotations

import json
import logging

from esqly import EsqlyError, StringQuery, create_query, query


class PersonRepository:
    @query("{ 'bool' : { 'must' : { 'term' : { 'name' : '?0' } } } }")
    def find_by_name(self, name: str) -> StringQuery: ...

    @query("{ 'bool' : { 'must' : { 'term' : { 'age' : ?0 } } } }")
    def find_by_age_in(self, ages: list[int]) -> StringQuery: ...

    @query('{"bool": {"must": {"terms": {"name": ?0}}}}')
    def find_by_name_in(self, names: list[str]) -> StringQuery: ...

    @query('{"bool": {"should": [{"match": {"first": "?0"}}, {"match": {"last": "?0"}}]}}')
    def find_by_any_name(self, name: str) -> StringQuery: ...


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    print("=" * 50)
    print("Repository Query Example")
    print("=" * 50)

    repo = PersonRepository()

    print("\n[String]")
    print(f"  {repo.find_by_name('Luke').source}")

    print("\n[Scalar collection]")
    print(f"  {repo.find_by_age_in([30, 35, 40]).source}")

    print("\n[String collection (JSON)]")
    q = repo.find_by_name_in(['hello "Stranger"', "Another string"])
    print(f"  {q.source}")
    print(f"  parsed: {json.loads(q.source)}")

    print("\n[Repeated placeholder]")
    print(f"  {repo.find_by_any_name('Skywalker').source}")

    print("\n[create_query]")
    print(f"  {create_query('name:?0 AND age:?1', ['Leia', 19]).source}")

    print("\n[Error]")
    try:
        create_query("?0 ?5", ["a", "b", "c"])
    except EsqlyError as e:
        print(f"  {type(e).__name__}: {e}")

    print("\n" + "=" * 50)
    print("Done!")


if __name__ == "__main__":
    main()
