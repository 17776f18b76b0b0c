"""Home page carousel: slide data and the index/toggle state machine."""

SLIDES = [
    {
        "path": "airforce1.jpeg",
        "alt": "Nike Air Force 1",
        "title": "Classic White",
        "description": "The iconic Air Force 1 in pristine white leather",
    },
    {
        "path": "airforce2.jpeg",
        "alt": "Nike Air Force 1 Black Edition",
        "title": "Black Edition",
        "description": "Premium black leather with enhanced cushioning",
    },
    {
        "path": "airforce3.jpeg",
        "alt": "Nike Air Force 1 Custom Colors",
        "title": "Custom Colors",
        "description": "Express yourself with vibrant color options",
    },
    {
        "path": "airforce4.jpeg",
        "alt": "Nike Air Force 1 Limited Edition",
        "title": "Limited Edition",
        "description": "Exclusive designs for true collectors",
    },
]

TICK = "tick"
PREV = "prev"
NEXT = "next"
SELECT = "select"
TOGGLE_ROTATE = "toggle-rotate"
TOGGLE_FADE = "toggle-fade"


def initial_state():
    return {"index": 0, "auto_rotate": True, "fade": True}


def next_index(index, count=len(SLIDES)):
    return (index + 1) % count


def prev_index(index, count=len(SLIDES)):
    return (index - 1 + count) % count


def step(state, action, target=None, count=len(SLIDES)):
    """Apply one carousel action and return the new state."""
    state = dict(initial_state(), **(state or {}))
    index = state["index"]
    if action == TICK:
        if state["auto_rotate"]:
            state["index"] = next_index(index, count)
    elif action == NEXT:
        state["index"] = next_index(index, count)
    elif action == PREV:
        state["index"] = prev_index(index, count)
    elif action == SELECT:
        if target is not None and 0 <= int(target) < count:
            state["index"] = int(target)
    elif action == TOGGLE_ROTATE:
        state["auto_rotate"] = not state["auto_rotate"]
    elif action == TOGGLE_FADE:
        state["fade"] = not state["fade"]
    else:
        raise ValueError(f"Unknown carousel action: {action}")
    return state
