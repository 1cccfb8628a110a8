"""Fixture package imported by its dotted name."""

import asyncio

json_str = '{"prop": "jsonStr"}'

nested_json_str = {"json_str": '{"prop": "jsonStr"}'}


def get_obj():
    return {"name": "test"}


def get_obj_with_parameters(label, id):
    return {"label": label, "id": id}


async def _deferred_text():
    await asyncio.sleep(0)
    return '{"prop": "deferred"}'


deferred_json_str = _deferred_text()
