"""
Main GraphQL package
"""
