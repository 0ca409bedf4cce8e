"""Shared definitions"""
