"""End-to-end scenarios for actions.

Each scenario serves actions through an adapter and checks one aspect
of the full request/response cycle.
"""
