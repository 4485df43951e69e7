"""Tests for the device and property models."""

from unittest.mock import MagicMock

import math

import pytest

from openhardwaremonitor import (
    DeviceDescription,
    DeviceModel,
    PropertyDescription,
    PropertyType,
    ValidationError,
)


@pytest.fixture
def description() -> DeviceDescription:
    return DeviceDescription(
        name="Fan controller",
        type="multiLevelSwitch",
        properties={
            "on": PropertyDescription(name="on", type=PropertyType.BOOLEAN, value=False),
            "level": PropertyDescription(
                name="level",
                type=PropertyType.NUMBER,
                value=50,
                unit="%",
                minimum=0,
                maximum=100,
            ),
            "label": PropertyDescription(name="label", type=PropertyType.STRING, value="fan"),
        },
    )


@pytest.fixture
def observer() -> MagicMock:
    return MagicMock()


class TestDeviceModel:
    """Test device construction."""

    def test_properties_in_order(self, description, observer):
        device = DeviceModel("fan-1", description, observer)

        assert device.id == "fan-1"
        assert device.type == "multiLevelSwitch"
        assert list(device.properties) == ["on", "level", "label"]
        assert device.properties["level"].unit == "%"

    def test_initial_notifications(self, description, observer):
        device = DeviceModel("fan-1", description, observer)

        notified = [call.args[0] for call in observer.property_changed.call_args_list]
        assert [prop.name for prop in notified] == ["on", "level", "label"]
        assert notified[0] is device.properties["on"]

    def test_properties_are_read_only(self, description):
        device = DeviceModel("fan-1", description)

        with pytest.raises(TypeError):
            device.properties["new"] = device.properties["on"]

    def test_id_is_immutable(self, description):
        device = DeviceModel("fan-1", description)

        with pytest.raises(AttributeError):
            device.id = "fan-2"

    def test_mapping_key_names_property(self, observer):
        description = DeviceDescription(
            name="CPU",
            properties={
                "Temperatures/CPU Core #1": PropertyDescription(
                    name="CPU Core #1", type=PropertyType.NUMBER, value=45, unit="°C"
                )
            },
        )

        device = DeviceModel("cpu", description, observer)

        assert device.get_property("Temperatures/CPU Core #1").name == "Temperatures/CPU Core #1"
        assert device.get_property("CPU Core #1") is None

    def test_as_dict(self, description):
        device = DeviceModel("fan-1", description)

        data = device.as_dict()
        assert data["id"] == "fan-1"
        assert data["properties"]["level"] == {
            "name": "level",
            "type": "number",
            "value": 50,
            "unit": "%",
            "minimum": 0,
            "maximum": 100,
        }


class TestPropertyModel:
    """Test setting property values."""

    @pytest.mark.asyncio
    async def test_set_value_in_range(self, description, observer):
        device = DeviceModel("fan-1", description, observer)
        observer.reset_mock()
        level = device.properties["level"]

        assert await level.set_value(75) == 75

        assert level.get_value() == 75
        observer.property_changed.assert_called_once_with(level)

    @pytest.mark.asyncio
    async def test_set_value_out_of_range(self, description, observer):
        device = DeviceModel("fan-1", description, observer)
        observer.reset_mock()
        level = device.properties["level"]

        with pytest.raises(ValidationError):
            await level.set_value(150)

        assert level.get_value() == 50
        observer.property_changed.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("on", 1),
            ("on", "true"),
            ("level", True),
            ("level", "75"),
            ("level", math.nan),
            ("level", math.inf),
            ("label", 3),
        ],
    )
    async def test_set_value_wrong_type(self, description, observer, name, value):
        device = DeviceModel("fan-1", description, observer)
        observer.reset_mock()
        prop = device.properties[name]
        before = prop.get_value()

        with pytest.raises(ValidationError):
            await prop.set_value(value)

        assert prop.get_value() == before
        observer.property_changed.assert_not_called()

    @pytest.mark.asyncio
    async def test_set_value_read_only(self, observer):
        description = DeviceDescription(
            name="CPU",
            properties={
                "temp": PropertyDescription(
                    name="temp", type=PropertyType.NUMBER, value=45, read_only=True
                )
            },
        )
        device = DeviceModel("cpu", description, observer)

        with pytest.raises(ValidationError):
            await device.properties["temp"].set_value(50)
        assert device.properties["temp"].get_value() == 45

    @pytest.mark.asyncio
    async def test_device_transforms_value(self, description, observer):
        class SteppedDevice(DeviceModel):
            async def transform_value(self, prop, value):
                return round(value / 10) * 10

        device = SteppedDevice("fan-1", description, observer)
        observer.reset_mock()

        assert await device.properties["level"].set_value(47) == 50
        assert device.properties["level"].get_value() == 50
        observer.property_changed.assert_called_once()

    def test_update_cached_value(self, description, observer):
        device = DeviceModel("fan-1", description, observer)
        observer.reset_mock()
        level = device.properties["level"]

        assert level.update_cached_value(50) is False
        observer.property_changed.assert_not_called()

        assert level.update_cached_value(60) is True
        assert level.get_value() == 60
        observer.property_changed.assert_called_once_with(level)


class TestDescriptions:
    """Test building descriptions from plain mappings."""

    def test_device_from_dict(self, switch_description):
        description = DeviceDescription.from_dict(switch_description)

        assert description.name == "example-plug"
        assert description.type == "onOffSwitch"
        assert description.properties["on"].type == PropertyType.BOOLEAN
        assert description.properties["on"].value is False

    def test_device_without_name(self):
        with pytest.raises(ValidationError):
            DeviceDescription.from_dict({"properties": {}})

    def test_unknown_property_type(self):
        with pytest.raises(ValidationError):
            PropertyDescription.from_dict("on", {"type": "color"})


class TestInitialValues:
    """Test that initial values must fit their property."""

    @pytest.mark.parametrize(
        "prop",
        [
            PropertyDescription(name="on", type=PropertyType.BOOLEAN, value="yes"),
            PropertyDescription(name="level", type=PropertyType.NUMBER, value=500, maximum=100),
            PropertyDescription(name="level", type=PropertyType.NUMBER, value=math.nan),
            PropertyDescription(name="label", type=PropertyType.STRING, value=None),
        ],
    )
    def test_invalid_initial_value(self, prop, observer):
        description = DeviceDescription(name="broken", properties={prop.name: prop})

        with pytest.raises(ValidationError):
            DeviceModel("broken", description, observer)

        observer.property_changed.assert_not_called()

    def test_no_notifications_when_later_property_is_invalid(self, observer):
        description = DeviceDescription(
            name="broken",
            properties={
                "on": PropertyDescription(name="on", type=PropertyType.BOOLEAN, value=True),
                "level": PropertyDescription(name="level", type=PropertyType.NUMBER, value="x"),
            },
        )

        with pytest.raises(ValidationError):
            DeviceModel("broken", description, observer)

        observer.property_changed.assert_not_called()

    def test_read_only_property_accepts_initial_value(self):
        description = DeviceDescription(
            name="CPU",
            properties={
                "temp": PropertyDescription(
                    name="temp", type=PropertyType.NUMBER, value=45, maximum=70, read_only=True
                )
            },
        )

        device = DeviceModel("cpu", description)

        assert device.properties["temp"].get_value() == 45

    def test_update_cached_value_rejects_invalid_reading(self, description, observer):
        device = DeviceModel("fan-1", description, observer)
        observer.reset_mock()
        level = device.properties["level"]

        with pytest.raises(ValidationError):
            level.update_cached_value("n/a")

        assert level.get_value() == 50
        observer.property_changed.assert_not_called()
