"""Firestore ODM schema compiler."""
