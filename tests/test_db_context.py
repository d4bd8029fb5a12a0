"""Integration tests against the SQLite record store."""

import pytest

from lazy_orm import RecordNotFound, Settings, db_context
from lazy_orm.entity_meta import EntityMeta

from models import Author, Book, Comment, Desk, Employee, Photo


async def test_lazy_collection_and_inverse(db):
    author = Author(name="Le Guin")
    await author.save()
    for title in ("Lathe of Heaven", "The Dispossessed"):
        await Book(title=title, author_id=author.id).save()

    loaded = await Author.get_by_id(author.id)
    assert loaded.books.is_loaded() is False

    books = await loaded.books.load_target()

    assert [b.title for b in books] == ["Lathe of Heaven", "The Dispossessed"]
    assert all(b.author.target is loaded for b in books)


async def test_belongs_to_loads_saved_author(db):
    author = Author(name="Borges")
    await author.save()
    book = Book(title="Ficciones", author=author)
    await book.save()

    fresh = await Book.get_by_id(book.id)
    target = await fresh.author.load_target()

    assert target.id == author.id
    assert target.name == "Borges"


async def test_deleted_target_becomes_empty(db):
    author = Author(name="Anonymous")
    await author.save()
    book = Book(title="Beowulf", author_id=author.id)
    await book.save()
    await author.delete()

    assert await book.author.reload() is None
    assert book.author.is_loaded()


async def test_missing_row_raises_not_found_from_store(db):
    book = Book(title="Orphan", author_id=999)
    await book.save()

    with pytest.raises(RecordNotFound):
        await db.fetch_target(book, Book._relationships["author"])


async def test_changed_foreign_key_is_refetched(db):
    first = Author(name="First")
    second = Author(name="Second")
    await first.save()
    await second.save()
    book = Book(title="Moved", author_id=first.id)
    await book.save()
    assert (await book.author.load_target()).name == "First"

    book.author_id = second.id

    assert book.author.is_stale()
    assert (await book.author.load_target()).name == "Second"


async def test_concat_persists_reference(db):
    author = Author(name="Calvino")
    await author.save()
    book = Book(title="Invisible Cities")
    await book.save()

    await author.books.concat(book)

    stored = await Book.get_by_id(book.id)
    assert stored.author_id == author.id
    assert book in author.books


async def test_concat_unsaved_record_sets_key_only(db):
    author = Author(name="Eco")
    await author.save()
    book = Book(title="Foucault's Pendulum")

    await author.books.concat(book)

    assert book.author_id == author.id
    assert await Book.query().count() == 0


async def test_polymorphic_round_trip(db):
    photo = Photo(caption="Harbour")
    await photo.save()
    comment = Comment(body="Nice", commentable=photo)
    await comment.save()

    fresh = await Comment.get_by_id(comment.id)
    target = await fresh.commentable.load_target()

    assert isinstance(target, Photo)
    assert target.caption == "Harbour"
    assert target.latest_comment.target is fresh


async def test_cleared_polymorphic_type_loads_nothing(db):
    photo = Photo(caption="Pier")
    await photo.save()
    comment = Comment(body="Windy", commentable=photo)
    await comment.save()
    assert await comment.commentable.load_target() is photo

    comment.commentable_type = None

    assert await comment.commentable.load_target() is None
    assert await db.fetch_target(comment, Comment._relationships["commentable"]) is None


async def test_get_all_returns_saved_rows(db):
    for name in ("Woolf", "Joyce"):
        await Author(name=name).save()

    authors = await Author.get_all()

    assert sorted(a.name for a in authors) == ["Joyce", "Woolf"]


async def test_one_to_one_inverse(db):
    employee = Employee(name="Ada")
    await employee.save()
    desk = await _saved_desk(employee)
    employee.desk_id = desk.id
    await employee.save()

    fresh = await Employee.get_by_id(employee.id)
    loaded_desk = await fresh.desk.load_target()

    assert loaded_desk.label == "4F-12"
    assert loaded_desk.employee.target is fresh


async def test_new_owner_needs_no_query(db):
    assert await Author(name="Unsaved").books.load_target() == []


async def test_from_settings(tmp_path, monkeypatch):
    monkeypatch.delenv("LAZY_ORM_CONFIG", raising=False)
    monkeypatch.setenv("LAZY_ORM_DB_PATH", str(tmp_path / "nested" / "app.sqlite"))
    monkeypatch.setenv("LAZY_ORM_SYNC_SCHEMA", "true")

    context = db_context.from_settings(Settings())
    await context.initialize()
    try:
        author = Author(name="Configured")
        await author.save()
        assert await Author.query().count() == 1
        assert (tmp_path / "nested" / "app.sqlite").exists()
    finally:
        for cls in EntityMeta.registry.values():
            cls._context = None


async def _saved_desk(employee):
    desk = Desk(label="4F-12", employee_id=employee.id)
    await desk.save()
    return desk
