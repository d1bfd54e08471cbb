"""System Management BIOS tables: structure types, table parsing and memory records."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar

from sysprobe.types import Version

__all__ = [
    "SmbiosType",
    "SmbiosItem",
    "Smbios",
    "PhysicalMemoryArray",
    "MemoryDevice",
    "type_name",
    "parse_table",
    "parse_raw",
]

_HEADER = struct.Struct("<BBH")
# Used20CallingMethod, major, minor, DMI revision, table length
_RAW_HEADER = struct.Struct("<BBBBI")


class SmbiosType(IntEnum):
    """SMBIOS structure types, including common OEM-specific ones."""

    BIOS = 0x00
    System = 0x01
    Baseboard = 0x02
    Chassis = 0x03
    Processor = 0x04
    MemoryController = 0x05
    MemoryModule = 0x06
    Cache = 0x07
    PortConnector = 0x08
    SystemSlots = 0x09
    OnBoardDevices = 0x0A
    OEMStrings = 0x0B
    SystemConfigurationOptions = 0x0C
    BIOSLanguage = 0x0D
    GroupAssociations = 0x0E
    SystemEventLog = 0x0F
    PhysicalMemoryArray = 0x10
    MemoryDevice = 0x11
    MemoryError32Bit = 0x12
    MemoryArrayMappedAddress = 0x13
    MemoryDeviceMappedAddress = 0x14
    BuiltInPointingDevice = 0x15
    PortableBattery = 0x16
    SystemReset = 0x17
    HardwareSecurity = 0x18
    SystemPowerControls = 0x19
    VoltageProbe = 0x1A
    CoolingDevice = 0x1B
    TemperatureProbe = 0x1C
    ElectricalCurrentProbe = 0x1D
    OutOfBandRemoteAccess = 0x1E
    BootIntegrityServices = 0x1F
    SystemBoot = 0x20
    MemoryError64Bit = 0x21
    ManagementDevice = 0x22
    ManagementDeviceComponent = 0x23
    ManagementDeviceThresholdData = 0x24
    MemoryChannel = 0x25
    IPMIDevice = 0x26
    SystemPowerSupply = 0x27
    Additional = 0x28
    OnboardDevicesExtended = 0x29
    ManagementControllerHostInterface = 0x2A
    TPMDevice = 0x2B
    ProcessorAdditional = 0x2C
    FirmwareInventory = 0x2D
    StringProperty = 0x2E
    Inactive = 0x7E
    EndOfTable = 0x7F
    # Intel
    Intel_vPro = 0x83
    # Lenovo
    Lenovo_ThinkVantageTechnologiesFeatureBits = 0x83
    Lenovo_DevicePresenceDetectionBits = 0x87
    Lenovo_ThinkPadEmbeddedControllerProgram = 0x8C
    # Acer
    AcerHotkeyFunction = 0xAA
    # Fujitsu
    FSC_OMFBoardID = 0xB0
    FSC_OMFBIOSID = 0xB1
    FSC_SerialAndParallelPortConfiguration = 0xB3
    FSC_AdvancedPowerManagementConfiguration = 0xB4
    FSC_DisplayIdentification = 0xBA
    FSC_BIOSErrorLog = 0xBB
    FSC_BIOSIdentification = 0xBC
    FSC_HardwareControl = 0xBD
    FSC_MultipurposeStaticDMIStructures = 0xBE
    # HP
    HP_SuperIoEnableDisableFeatures = 0xC2
    HP_CPUMicrocodePatch = 0xC7
    HP_DeviceCorrelationRecord = 0xCB
    HP_ProLiantSystemRackLocator = 0xCC
    HP_BIOS_PXE_NIC_PCI_MAC_209 = 0xD1
    HP_64bitCRU = 0xD4
    HP_VersionIndicatorRecord = 0xD8
    HP_ProLiant = 0xDB
    HP_BIOS_iSCSI_NIC_PCI_MAC = 0xDD
    HP_TrustedModuleStatus = 0xE0
    HP_PowerSupply = 0xE6
    HP_BIOS_PXE_NIC_PCI_MAC_233 = 0xE9
    HPE_ProLiantHDDBackplane = 0xEC
    HPE_DIMMVendorPartNumber = 0xED
    HPE_USBPortConnectorCorrelationRecord = 0xEE
    HPE_ProliantInventoryRecord = 0xF0
    HPE_HardDriveInventoryRecord = 0xF2
    # Dell
    DELL_RevisionsAndIDs = 0xD0
    DELL_ParallelPort = 0xD1
    DELL_SerialPort = 0xD2
    DELL_IRPort = 0xD3


_TYPE_NAMES: dict[SmbiosType, str] = {
    SmbiosType.BIOS: "BIOS Information",
    SmbiosType.System: "System Information",
    SmbiosType.Baseboard: "Baseboard (or Module) Information",
    SmbiosType.Chassis: "System Enclosure or Chassis",
    SmbiosType.Processor: "Processor Information",
    SmbiosType.MemoryController: "Memory Controller Information",
    SmbiosType.MemoryModule: "Memory Module Information",
    SmbiosType.Cache: "Cache Information",
    SmbiosType.PortConnector: "Port Connector Information",
    SmbiosType.SystemSlots: "System Slot",
    SmbiosType.OnBoardDevices: "On Board Devices Information",
    SmbiosType.OEMStrings: "OEM Strings",
    SmbiosType.SystemConfigurationOptions: "System Configuration Options",
    SmbiosType.BIOSLanguage: "BIOS Language Information",
    SmbiosType.GroupAssociations: "Group Associations",
    SmbiosType.SystemEventLog: "System Event Log",
    SmbiosType.PhysicalMemoryArray: "Physical Memory Array",
    SmbiosType.MemoryDevice: "Memory Device",
    SmbiosType.MemoryError32Bit: "32-Bit Memory Error Information",
    SmbiosType.MemoryArrayMappedAddress: "Memory Array Mapped Address",
    SmbiosType.MemoryDeviceMappedAddress: "Memory Device Mapped Address",
    SmbiosType.BuiltInPointingDevice: "Built-in Pointing Device",
    SmbiosType.PortableBattery: "Portable Battery",
    SmbiosType.SystemReset: "System Reset",
    SmbiosType.HardwareSecurity: "Hardware Security",
    SmbiosType.SystemPowerControls: "System Power Controls",
    SmbiosType.VoltageProbe: "Voltage Probe",
    SmbiosType.CoolingDevice: "Cooling Device",
    SmbiosType.TemperatureProbe: "Temperature Probe",
    SmbiosType.ElectricalCurrentProbe: "Electrical Current Probe",
    SmbiosType.OutOfBandRemoteAccess: "Out-of-Band Remote Access",
    SmbiosType.BootIntegrityServices: "Boot Integrity Services Entry Point",
    SmbiosType.SystemBoot: "System Boot Information",
    SmbiosType.MemoryError64Bit: "64-Bit Memory Error Information",
    SmbiosType.ManagementDevice: "Management Device",
    SmbiosType.ManagementDeviceComponent: "Management Device Component",
    SmbiosType.ManagementDeviceThresholdData: "Management Device Threshold Data",
    SmbiosType.MemoryChannel: "Memory Channel",
    SmbiosType.IPMIDevice: "IPMI Device Information",
    SmbiosType.SystemPowerSupply: "System Power Supply",
    SmbiosType.Additional: "Additional Information",
    SmbiosType.OnboardDevicesExtended: "Onboard Devices Extended Information",
    SmbiosType.ManagementControllerHostInterface: "Management Controller Host Interface",
    SmbiosType.TPMDevice: "TPM Device",
    SmbiosType.ProcessorAdditional: "Processor Additional Information",
    SmbiosType.FirmwareInventory: "Firmware Inventory Information",
    SmbiosType.StringProperty: "String Property",
    SmbiosType.Inactive: "Inactive",
    SmbiosType.EndOfTable: "End-of-Table",
    SmbiosType.Intel_vPro: "Intel vPro",
    SmbiosType.Lenovo_DevicePresenceDetectionBits: "Lenovo Device Presence Detection bits",
    SmbiosType.Lenovo_ThinkPadEmbeddedControllerProgram: "Lenovo ThinkPad Embedded Controller Program",
    SmbiosType.AcerHotkeyFunction: "Acer Hotkey Function",
    SmbiosType.FSC_OMFBoardID: "FSC OMF Board ID",
    SmbiosType.FSC_OMFBIOSID: "FSC OMF BIOS ID",
    SmbiosType.FSC_SerialAndParallelPortConfiguration: "FSC Serial and Parallel Port Configuration",
    SmbiosType.FSC_AdvancedPowerManagementConfiguration: "FSC Advanced Power Management Configuration",
    SmbiosType.FSC_DisplayIdentification: "FSC Display Identification",
    SmbiosType.FSC_BIOSErrorLog: "FSC BIOS Error-Log",
    SmbiosType.FSC_BIOSIdentification: "FSC BIOS Identification",
    SmbiosType.FSC_HardwareControl: "FSC Hardware Control",
    SmbiosType.FSC_MultipurposeStaticDMIStructures: "FSC Multipurpose static DMI structures",
    SmbiosType.HP_SuperIoEnableDisableFeatures: "HP Super IO Enable/Disable Features",
    SmbiosType.HP_CPUMicrocodePatch: "HP CPU Microcode Patch",
    SmbiosType.HP_DeviceCorrelationRecord: "HP Device Correlation Record",
    SmbiosType.HP_ProLiantSystemRackLocator: "HP ProLiant System/Rack Locator",
    SmbiosType.HP_BIOS_PXE_NIC_PCI_MAC_209: "HP BIOS PXE NIC PCI and MAC Information",
    SmbiosType.HP_64bitCRU: "HP 64-bit CRU Information",
    SmbiosType.HP_VersionIndicatorRecord: "HP Version Indicator Record",
    SmbiosType.HP_ProLiant: "HP ProLiant Information",
    SmbiosType.HP_BIOS_iSCSI_NIC_PCI_MAC: "HP BIOS iSCSI NIC PCI and MAC Information",
    SmbiosType.HP_TrustedModuleStatus: "HP Trusted Module (TPM or TCM) Status",
    SmbiosType.HP_PowerSupply: "HP Power Supply Information",
    SmbiosType.HP_BIOS_PXE_NIC_PCI_MAC_233: "HP BIOS PXE NIC PCI and MAC Information",
    SmbiosType.HPE_ProLiantHDDBackplane: "HPE ProLiant HDD Backplane",
    SmbiosType.HPE_DIMMVendorPartNumber: "HPE DIMM Vendor Part Number Information",
    SmbiosType.HPE_USBPortConnectorCorrelationRecord: "HPE USB Port Connector Correlation Record",
    SmbiosType.HPE_ProliantInventoryRecord: "HPE Proliant Inventory Record",
    SmbiosType.HPE_HardDriveInventoryRecord: "HPE Hard Drive Inventory Record",
    SmbiosType.DELL_RevisionsAndIDs: "DELL Revisions and IDs",
    SmbiosType.DELL_SerialPort: "DELL Serial Port",
    SmbiosType.DELL_IRPort: "DELL IR Port",
}


def type_name(value: int) -> str:
    """The descriptive name of a structure type, or 'Unknown'."""
    try:
        kind = SmbiosType(value)
    except ValueError:
        return "Unknown"
    return _TYPE_NAMES.get(kind, "Unknown")


@dataclass
class SmbiosItem:
    """One structure of the table: its formatted area and its text strings."""

    type: int
    length: int  # length of the formatted area after the 4-byte header
    handle: int
    fields: bytes = b""
    strings: list[str] = field(default_factory=list)


@dataclass
class Smbios:
    """An SMBIOS table with its version and raw data."""

    version: Version = field(default_factory=Version)
    data: bytes = b""
    table: list[SmbiosItem] = field(default_factory=list)


def parse_table(data: bytes) -> list[SmbiosItem]:
    """Split raw SMBIOS table data into structures; raises ValueError on a bad header length."""
    items: list[SmbiosItem] = []
    size = len(data)
    i = 0
    while i + _HEADER.size < size:
        kind, length, handle = _HEADER.unpack_from(data, i)
        if length < _HEADER.size:
            raise ValueError(f"structure at offset {i} has invalid length {length}")
        item = SmbiosItem(
            type=kind,
            length=length - _HEADER.size,
            handle=handle,
            fields=bytes(data[i + _HEADER.size : i + length]),
        )
        i += length

        # The string set ends with a double NUL.
        while i + 1 < size:
            end = data.find(b"\0", i)
            if end == -1:
                end = size
            if end > i:
                item.strings.append(bytes(data[i:end]).decode("utf-8", errors="replace"))
            i = end
            if i + 1 < size and data[i] == 0 and data[i + 1] == 0:
                i += 2
                break
            i += 1

        items.append(item)
    return items


def parse_raw(blob: bytes) -> Smbios:
    """Parse a raw firmware table blob (8-byte header followed by the table data)."""
    if len(blob) < _RAW_HEADER.size:
        raise ValueError("raw SMBIOS data is shorter than its header")
    _, major, minor, revision, length = _RAW_HEADER.unpack_from(blob)
    end = _RAW_HEADER.size + length
    if len(blob) < end:
        raise ValueError("raw SMBIOS data is shorter than its declared table length")
    data = bytes(blob[_RAW_HEADER.size : end])
    return Smbios(version=Version(major, minor, revision), data=data, table=parse_table(data))


def _unpack_fields(layout: tuple[tuple[str, str], ...], data: bytes) -> dict[str, Any]:
    """Unpack little-endian fields in order, stopping at the first one the data does not hold."""
    values: dict[str, Any] = {}
    offset = 0
    for name, fmt in layout:
        width = struct.calcsize("<" + fmt)
        if offset + width > len(data):
            break
        (values[name],) = struct.unpack_from("<" + fmt, data, offset)
        offset += width
    return values


@dataclass
class PhysicalMemoryArray:
    """Formatted area of a Physical Memory Array structure (type 16)."""

    location: int = 0
    use: int = 0
    memory_error_correction: int = 0
    maximum_capacity: int = 0
    memory_error_information_handle: int = 0
    number_of_memory_devices: int = 0
    extended_maximum_capacity: int = 0

    _LAYOUT: ClassVar[tuple[tuple[str, str], ...]] = (
        ("location", "B"),
        ("use", "B"),
        ("memory_error_correction", "B"),
        ("maximum_capacity", "I"),
        ("memory_error_information_handle", "H"),
        ("number_of_memory_devices", "H"),
        ("extended_maximum_capacity", "Q"),
    )

    @classmethod
    def from_bytes(cls, data: bytes) -> PhysicalMemoryArray:
        """Decode the formatted area; fields absent from older versions stay zero."""
        return cls(**_unpack_fields(cls._LAYOUT, data))


@dataclass
class MemoryDevice:
    """Formatted area of a Memory Device structure (type 17); string fields are 1-based indexes."""

    physical_memory_array_handle: int = 0
    memory_error_information_handle: int = 0
    total_width: int = 0
    data_width: int = 0
    size: int = 0
    form_factor: int = 0
    device_set: int = 0
    device_locator: int = 0
    bank_locator: int = 0
    memory_type: int = 0
    type_detail: int = 0
    speed: int = 0
    manufacturer: int = 0
    serial_number: int = 0
    asset_tag: int = 0
    part_number: int = 0
    attributes: int = 0
    extended_size: int = 0
    configured_memory_speed: int = 0
    minimum_voltage: int = 0
    maximum_voltage: int = 0
    configured_voltage: int = 0
    memory_technology: int = 0
    memory_operating_mode_capability: int = 0
    firmware_version: int = 0
    module_manufacturer_id: int = 0
    module_product_id: int = 0
    memory_subsystem_controller_manufacturer_id: int = 0
    memory_subsystem_controller_product_id: int = 0
    nonvolatile_size: int = 0
    volatile_size: int = 0
    cache_size: int = 0
    logical_size: int = 0
    extended_speed: int = 0
    extended_configured_memory_speed: int = 0
    pmic0_manufacturer_id: int = 0
    pmic0_revision_number: int = 0
    rcd_manufacturer_id: int = 0
    rcd_revision_number: int = 0

    _LAYOUT: ClassVar[tuple[tuple[str, str], ...]] = (
        ("physical_memory_array_handle", "H"),
        ("memory_error_information_handle", "H"),
        ("total_width", "H"),
        ("data_width", "H"),
        ("size", "H"),
        ("form_factor", "B"),
        ("device_set", "B"),
        ("device_locator", "B"),
        ("bank_locator", "B"),
        ("memory_type", "B"),
        ("type_detail", "H"),
        ("speed", "H"),
        ("manufacturer", "B"),
        ("serial_number", "B"),
        ("asset_tag", "B"),
        ("part_number", "B"),
        ("attributes", "B"),
        ("extended_size", "I"),
        ("configured_memory_speed", "H"),
        ("minimum_voltage", "H"),
        ("maximum_voltage", "H"),
        ("configured_voltage", "H"),
        ("memory_technology", "B"),
        ("memory_operating_mode_capability", "H"),
        ("firmware_version", "B"),
        ("module_manufacturer_id", "H"),
        ("module_product_id", "H"),
        ("memory_subsystem_controller_manufacturer_id", "H"),
        ("memory_subsystem_controller_product_id", "H"),
        ("nonvolatile_size", "Q"),
        ("volatile_size", "Q"),
        ("cache_size", "Q"),
        ("logical_size", "Q"),
        ("extended_speed", "I"),
        ("extended_configured_memory_speed", "I"),
        ("pmic0_manufacturer_id", "H"),
        ("pmic0_revision_number", "H"),
        ("rcd_manufacturer_id", "H"),
        ("rcd_revision_number", "H"),
    )

    @classmethod
    def from_bytes(cls, data: bytes) -> MemoryDevice:
        """Decode the formatted area; fields absent from older versions stay zero."""
        return cls(**_unpack_fields(cls._LAYOUT, data))