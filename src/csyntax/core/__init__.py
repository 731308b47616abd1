"""
csyntax core: syntax tree types, errors, configuration and the language pipeline.
"""
