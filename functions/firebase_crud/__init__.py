"""
Firebase CRUD backend.

A small FastAPI service exposing CRUD-style endpoints over Cloud Firestore,
the Firebase Realtime Database and a blob storage bucket.
"""
