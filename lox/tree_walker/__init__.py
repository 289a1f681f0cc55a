"""
The run-time: values, environments in use, and direct evaluation of the syntax tree.
"""
