"""sboxlab: recovery of a trailing S-box layer from an encrypt-only block oracle.

Research / education only. Do NOT use in production.
"""
