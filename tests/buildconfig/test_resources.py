import unittest

from buildconfig.exceptions import ResourceError, UnsupportedKindError
from buildconfig.kinds import BUILD_API_GROUP_VERSION, LEGACY_API_VERSION, ResourceKind
from buildconfig.models import BuildConfig
from buildconfig.resources import ResourceFactory


class TestResourceFactoryStub(unittest.TestCase):
    def test_stub_build_config(self):
        bc = ResourceFactory().stub(ResourceKind.BUILD_CONFIG, "app", "web")
        self.assertIsInstance(bc, BuildConfig)
        self.assertEqual(bc.api_version, BUILD_API_GROUP_VERSION)
        self.assertEqual(bc.name, "app")
        self.assertEqual(bc.namespace, "web")
        self.assertEqual(bc.build_triggers, [])

    def test_stub_accepts_kind_name(self):
        bc = ResourceFactory().stub("BuildConfig", "app")
        self.assertIsNone(bc.namespace)

    def test_stub_legacy_api_version(self):
        bc = ResourceFactory(LEGACY_API_VERSION).stub(ResourceKind.BUILD_CONFIG, "app")
        self.assertEqual(bc.to_dict()["apiVersion"], "v1")

    def test_stub_unsupported_kind(self):
        with self.assertRaises(UnsupportedKindError) as cm:
            ResourceFactory().stub(ResourceKind.IMAGE_STREAM, "ruby")
        self.assertEqual(cm.exception.kind, "ImageStream")

    def test_stub_requires_name(self):
        for name in (None, "", "  "):
            with self.subTest(name=name):
                with self.assertRaises(ResourceError):
                    ResourceFactory().stub(ResourceKind.BUILD_CONFIG, name)

    def test_stubs_are_independent(self):
        factory = ResourceFactory()
        first = factory.stub(ResourceKind.BUILD_CONFIG, "a")
        second = factory.stub(ResourceKind.BUILD_CONFIG, "b")
        first.add_label("x", "y")
        self.assertEqual(second.labels, {})

    def test_unsupported_api_version(self):
        with self.assertRaises(ResourceError):
            ResourceFactory("apps/v1")


class TestResourceFactoryCreate(unittest.TestCase):
    def test_create_build_config(self):
        bc = ResourceFactory().create(
            {"kind": "BuildConfig", "apiVersion": "v1", "metadata": {"name": "app"}}
        )
        self.assertEqual(bc.name, "app")
        self.assertEqual(bc.api_version, "v1")

    def test_create_without_kind(self):
        with self.assertRaises(ResourceError):
            ResourceFactory().create({"metadata": {"name": "app"}})

    def test_create_unsupported_kind(self):
        with self.assertRaises(UnsupportedKindError):
            ResourceFactory().create({"kind": "Build", "metadata": {"name": "app-1"}})

    def test_create_invalid_document(self):
        with self.assertRaises(ResourceError):
            ResourceFactory().create({"kind": "BuildConfig", "metadata": {}})


if __name__ == "__main__":
    unittest.main()
