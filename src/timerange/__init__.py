"""Time range resolution.

Turns free-form time expressions into absolute instants and renders display captions for a
`(from, to)` pair of expressions.
"""
