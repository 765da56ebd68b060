"""
Tests for the admin session, property management and about editing.
"""

import pytest

from conftest import run_async
from realty_site.admin import AboutAdmin, AdminSession, ImageUpload, PropertyAdmin, build_property_row
from realty_site.error_handling import NotAuthorizedError, ValidationError


def signed_in(store):
    session = AdminSession(store)
    run_async(session.sign_in("admin@example.com", "secret"))
    return session


def property_form(**fields):
    form = {
        "title": "Cobertura em Moema",
        "location": "Moema",
        "city": "São Paulo",
        "region": "SP",
        "price": "2100000",
        "type": "apartment",
        "status": "new",
        "bedrooms": "3",
        "suites": "",
        "images": [],
        "video_links": [],
    }
    form.update(fields)
    return form


def test_admin_sign_in(admin_store):
    session = signed_in(admin_store)
    assert session.is_authenticated
    session.require()


def test_wrong_password_is_not_authorized(admin_store):
    session = AdminSession(admin_store)
    with pytest.raises(NotAuthorizedError, match="E-mail ou senha inválidos"):
        run_async(session.sign_in("admin@example.com", "wrong"))
    assert not session.is_authenticated


def test_non_admin_is_signed_out(admin_store):
    session = AdminSession(admin_store)
    with pytest.raises(NotAuthorizedError, match="Acesso restrito a administradores"):
        run_async(session.sign_in("visitor@example.com", "secret"))
    assert admin_store.session is None
    assert not session.is_authenticated


def test_sign_out(admin_store):
    session = signed_in(admin_store)
    run_async(session.sign_out())
    assert not session.is_authenticated
    with pytest.raises(NotAuthorizedError):
        session.require()


def test_property_admin_requires_session(admin_store):
    admin = PropertyAdmin(admin_store, AdminSession(admin_store))
    with pytest.raises(NotAuthorizedError):
        run_async(admin.list())


def test_build_property_row_parses_numbers():
    row = build_property_row(property_form(display_status="  "))
    assert row["price"] == 2100000.0
    assert row["bedrooms"] == 3
    assert row["suites"] is None
    assert row["display_status"] is None


@pytest.mark.parametrize("fields, message", [
    ({"title": ""}, "Preencha todos os campos obrigatórios"),
    ({"location": " "}, "Preencha todos os campos obrigatórios"),
    ({"price": ""}, "Preencha todos os campos obrigatórios"),
    ({"price": "caro"}, "price"),
    ({"type": "castle"}, "Tipo de imóvel inválido"),
    ({"status": "sold"}, "Status inválido"),
    ({"video_links": ["youtube.com/watch?v=x"]}, "URL do vídeo inválida"),
])
def test_build_property_row_validation(fields, message):
    with pytest.raises(ValidationError, match=message):
        build_property_row(property_form(**fields))


def test_create_property_uploads_images(admin_store):
    admin = PropertyAdmin(admin_store, signed_in(admin_store))
    uploads = [ImageUpload("sala.JPG", b"jpeg-bytes", "image/jpeg")]

    record = run_async(admin.save(property_form(images=["https://cdn.example.com/a.jpg"]), uploads))

    assert record.title == "Cobertura em Moema"
    assert record.images[0] == "https://cdn.example.com/a.jpg"
    assert record.images[1].endswith(".jpg")
    assert ("properties", record.images[1]) in admin_store.files
    assert run_async(admin.load(record.id)).location == "Moema"


def test_image_limit(admin_store):
    admin = PropertyAdmin(admin_store, signed_in(admin_store), max_images=2)
    uploads = [ImageUpload(f"{n}.png", b"x") for n in range(3)]
    with pytest.raises(ValidationError, match="Máximo de 2 imagens permitido"):
        run_async(admin.save(property_form(), uploads))
    assert admin_store.files == {}


def test_update_property(admin_store):
    admin = PropertyAdmin(admin_store, signed_in(admin_store))
    record = run_async(admin.save(property_form(title="Novo título", price="999000"), property_id="p-1"))

    assert record.id == "p-1"
    assert record.title == "Novo título"
    assert record.price == 999000.0


def test_update_missing_property(admin_store):
    admin = PropertyAdmin(admin_store, signed_in(admin_store))
    with pytest.raises(ValidationError, match="Imóvel não encontrado"):
        run_async(admin.save(property_form(), property_id="p-404"))


def test_list_and_delete(admin_store):
    admin = PropertyAdmin(admin_store, signed_in(admin_store))
    records = run_async(admin.list())
    assert records[0].id == "p-9"

    assert run_async(admin.delete("p-9")) is True
    assert run_async(admin.delete("p-9")) is False
    assert run_async(admin.load("p-9")) is None


def test_about_insert_then_update(admin_store):
    about = AboutAdmin(admin_store, signed_in(admin_store))

    created = run_async(about.save("https://cdn.example.com/me.jpg", "Primeira versão"))
    updated = run_async(about.save("https://cdn.example.com/me2.jpg", "Segunda versão"))

    assert created.id == updated.id
    assert len(admin_store.tables["about_me"]) == 1
    assert run_async(about.load()).my_story == "Segunda versão"


@pytest.mark.parametrize("image, story, message", [
    ("", "História", "Preencha todos os campos obrigatórios"),
    ("https://cdn.example.com/me.jpg", "  ", "Preencha todos os campos obrigatórios"),
    ("me.jpg", "História", "URL da imagem de perfil inválida"),
])
def test_about_validation(admin_store, image, story, message):
    about = AboutAdmin(admin_store, signed_in(admin_store))
    with pytest.raises(ValidationError, match=message):
        run_async(about.save(image, story))


def test_forked_store_signs_in_alone(admin_store):
    session = signed_in(admin_store.fork())

    assert session.is_authenticated
    assert admin_store.session is None
    assert session.store.tables is admin_store.tables
    assert session.store.files is admin_store.files
