"""Pydantic schemas"""
