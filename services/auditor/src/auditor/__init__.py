"""
ModSentinel auditor service.

Loads the reference mod dataset, classifies the public metadata of every
session participant, and reports participants carrying disallowed
entries once per session.
"""
