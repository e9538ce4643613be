"""
Hypothesis strategies for path templates and parameter maps.

Generates templates with a known set of placeholders together with ordered
parameter lists that bind every placeholder plus a number of extra keys.
"""

from __future__ import annotations

from hypothesis import strategies as st

IDENT_START = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"
IDENT_REST = IDENT_START + "0123456789"


@st.composite
def placeholder_names(draw) -> str:
    """Generate names matching ``[A-Za-z_][A-Za-z0-9_]*``."""
    head = draw(st.sampled_from(IDENT_START))
    tail = draw(st.text(alphabet=IDENT_REST, max_size=12))
    return head + tail


@st.composite
def scalar_values(draw):
    """Generate scalar parameter values (str, int, float, bool)."""
    return draw(
        st.one_of(
            st.text(max_size=20),
            st.integers(),
            st.booleans(),
            st.floats(allow_nan=False, allow_infinity=False),
        )
    )


@st.composite
def static_segments(draw) -> str:
    """Generate literal path segments that never contain a placeholder."""
    return draw(st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789-.", min_size=1, max_size=8))


@st.composite
def templates_with_params(draw):
    """Generate ``(template, params, names, extras)``.

    ``params`` is a list of ``(key, value)`` pairs containing every name in
    ``names`` and every key in ``extras``, shuffled; ``extras`` lists the
    extra keys in the order they appear in ``params``.
    """
    keys = draw(st.lists(placeholder_names(), min_size=0, max_size=10, unique=True))
    split = draw(st.integers(min_value=0, max_value=len(keys)))
    names, extra_keys = keys[:split], keys[split:]

    segments: list[str] = []
    for name in names:
        if draw(st.booleans()):
            segments.append(draw(static_segments()))
        segments.append(f":{name}")
    if draw(st.booleans()):
        segments.append(draw(static_segments()))
    template = "/" + "/".join(segments)

    ordered_keys = draw(st.permutations(keys))
    params = [(key, draw(scalar_values())) for key in ordered_keys]
    extras = [key for key in ordered_keys if key in set(extra_keys)]
    return template, params, names, extras
