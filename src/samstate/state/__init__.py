"""State layer.

Path access, the embedded block codec and the volatile schedule all live
here; the interpreter and the reconciliation controller build on them.
"""
