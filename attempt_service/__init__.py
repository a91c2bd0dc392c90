"""
Attempt Service: authenticated tracking of users' attempts at timed tests.
"""
