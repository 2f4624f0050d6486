"""
SSE body parsing for assertions.
"""

import orjson


def parse_sse(raw: bytes | str) -> list[dict]:
    """
    Split an SSE body into frames.

    Comment frames come back as {"comment": text}, data frames as
    {"event": type, "data": decoded_json}.
    """
    text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
    frames = []
    for block in text.split("\n\n"):
        if not block.strip():
            continue
        lines = block.split("\n")
        if all(line.startswith(":") for line in lines):
            frames.append({"comment": "\n".join(line[2:] for line in lines)})
            continue
        frame = {}
        for line in lines:
            field, _, value = line.partition(": ")
            if field == "event":
                frame["event"] = value
            elif field == "data":
                frame["data"] = orjson.loads(value)
        frames.append(frame)
    return frames


def data_frames(frames: list[dict]) -> list[dict]:
    return [frame for frame in frames if "data" in frame]


def terminal_frames(frames: list[dict]) -> list[dict]:
    return [frame for frame in data_frames(frames) if frame["data"]["type"] == "done"]
