"""Shared pytest fixtures for bookworm tests."""

import json

import pytest


SAMPLE_BOOKS = [
    {
        "id": "dune",
        "title": "Dune",
        "author": "Frank Herbert",
        "publisher": "Chilton Books",
        "isbn": "9780441013593",
        "language": "English",
        "genre": "Science Fiction",
        "categories": ["Fiction", "Classics"],
        "type": "ebook",
        "fiction_type": "Fiction",
        "ebook_format": "EPUB",
        "published_date": "1965-08-01",
        "published_year": 1965,
        "created_at": "2024-01-05T10:00:00",
    },
    {
        "id": "dune-messiah",
        "title": "Dune Messiah",
        "author": "Frank Herbert",
        "publisher": "Putnam",
        "narrator": "Scott Brick",
        "language": "English",
        "genre": "Science Fiction",
        "categories": ["Fiction"],
        "type": "audiobook",
        "fiction_type": "Fiction",
        "audio_format": "MP3",
        "published_date": "1969-10-15",
        "published_year": 1969,
        "created_at": "2024-02-01T10:00:00",
    },
    {
        "id": "der-process",
        "title": "Der Process",
        "author": "Franz Kafka",
        "publisher": "Penguin Random House",
        "language": "German",
        "genre": "Literary Fiction",
        "categories": ["Fiction", "Classics"],
        "type": "ebook",
        "fiction_type": "Fiction",
        "ebook_format": "PDF",
        "published_date": "1925-04-26",
        "published_year": 1925,
        "created_at": "2024-01-20T10:00:00",
    },
    {
        "id": "brief-history",
        "title": "A Brief History of Time",
        "author": "Stephen Hawking",
        "publisher": "Bantam Books",
        "narrator": "Michael Jackson",
        "language": "English",
        "genre": "Science",
        "categories": ["Non-Fiction", "Science"],
        "type": "audiobook",
        "fiction_type": "Non-Fiction",
        "audio_format": "M4B",
        "published_date": "1988-04-01",
        "published_year": 1988,
        "created_at": "2024-03-10T10:00:00",
    },
    {
        "id": "sapiens",
        "title": "Sapiens",
        "author": "Yuval Noah Harari",
        "publisher": "Penguin Random House",
        "description": "A brief history of humankind",
        "language": "English",
        "genre": "History",
        "categories": ["Non-Fiction", "History"],
        "type": "ebook",
        "fiction_type": "Non-Fiction",
        "ebook_format": "EPUB",
        "published_date": "2011-01-01",
        "published_year": 2011,
        "created_at": "2024-02-15T10:00:00",
    },
]


@pytest.fixture
def sample_books():
    """Five hand-written catalog rows with distinct metadata."""
    return [dict(book) for book in SAMPLE_BOOKS]


@pytest.fixture
def many_books():
    """45 generated rows: two full pages and a short third page."""
    return [
        {
            "id": f"b{i:02d}",
            "title": f"Book {i:02d}",
            "author": "Anon",
            "type": "ebook" if i % 2 else "audiobook",
            "categories": ["Generated"],
            "published_date": f"{1990 + i % 20}-06-01",
            "published_year": 1990 + i % 20,
            "created_at": f"2024-01-01T00:{i:02d}:00",
        }
        for i in range(45)
    ]


@pytest.fixture
def catalog_file(tmp_path, sample_books):
    """The sample books written as a JSON catalog."""
    f = tmp_path / "catalog.json"
    f.write_text(json.dumps(sample_books))
    return f


@pytest.fixture
def large_catalog_file(tmp_path, many_books):
    """The generated books written as a JSON Lines catalog."""
    f = tmp_path / "large.jsonl"
    f.write_text("\n".join(json.dumps(book) for book in many_books))
    return f