"""
A tree-walking interpreter for Lox, a small dynamically-typed scripting language.
"""
