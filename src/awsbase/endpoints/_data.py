"""Partition and region table.

Declaration order is significant: it is the order in which partitions are
matched against a region ID.
"""

from __future__ import annotations

PARTITIONS: list[dict[str, object]] = [
    {
        "id": "aws",
        "name": "AWS Standard",
        "dns_suffix": "amazonaws.com",
        "region_regex": r"^(us|eu|ap|sa|ca|me|af|il|mx)\-\w+\-\d+$",
        "regions": {
            "af-south-1": "Africa (Cape Town)",
            "ap-east-1": "Asia Pacific (Hong Kong)",
            "ap-east-2": "Asia Pacific (Taipei)",
            "ap-northeast-1": "Asia Pacific (Tokyo)",
            "ap-northeast-2": "Asia Pacific (Seoul)",
            "ap-northeast-3": "Asia Pacific (Osaka)",
            "ap-south-1": "Asia Pacific (Mumbai)",
            "ap-south-2": "Asia Pacific (Hyderabad)",
            "ap-southeast-1": "Asia Pacific (Singapore)",
            "ap-southeast-2": "Asia Pacific (Sydney)",
            "ap-southeast-3": "Asia Pacific (Jakarta)",
            "ap-southeast-4": "Asia Pacific (Melbourne)",
            "ap-southeast-5": "Asia Pacific (Malaysia)",
            "ap-southeast-6": "Asia Pacific (New Zealand)",
            "ap-southeast-7": "Asia Pacific (Thailand)",
            "aws-global": "AWS Standard global region",
            "ca-central-1": "Canada (Central)",
            "ca-west-1": "Canada West (Calgary)",
            "eu-central-1": "Europe (Frankfurt)",
            "eu-central-2": "Europe (Zurich)",
            "eu-north-1": "Europe (Stockholm)",
            "eu-south-1": "Europe (Milan)",
            "eu-south-2": "Europe (Spain)",
            "eu-west-1": "Europe (Ireland)",
            "eu-west-2": "Europe (London)",
            "eu-west-3": "Europe (Paris)",
            "il-central-1": "Israel (Tel Aviv)",
            "me-central-1": "Middle East (UAE)",
            "me-south-1": "Middle East (Bahrain)",
            "mx-central-1": "Mexico (Central)",
            "sa-east-1": "South America (Sao Paulo)",
            "us-east-1": "US East (N. Virginia)",
            "us-east-2": "US East (Ohio)",
            "us-west-1": "US West (N. California)",
            "us-west-2": "US West (Oregon)",
        },
    },
    {
        "id": "aws-cn",
        "name": "AWS China",
        "dns_suffix": "amazonaws.com.cn",
        "region_regex": r"^cn\-\w+\-\d+$",
        "regions": {
            "aws-cn-global": "AWS China global region",
            "cn-north-1": "China (Beijing)",
            "cn-northwest-1": "China (Ningxia)",
        },
    },
    {
        "id": "aws-us-gov",
        "name": "AWS GovCloud (US)",
        "dns_suffix": "amazonaws.com",
        "region_regex": r"^us\-gov\-\w+\-\d+$",
        "regions": {
            "aws-us-gov-global": "AWS GovCloud (US) global region",
            "us-gov-east-1": "AWS GovCloud (US-East)",
            "us-gov-west-1": "AWS GovCloud (US-West)",
        },
    },
    {
        "id": "aws-iso",
        "name": "AWS ISO (US)",
        "dns_suffix": "c2s.ic.gov",
        "region_regex": r"^us\-iso\-\w+\-\d+$",
        "regions": {
            "aws-iso-global": "AWS ISO (US) global region",
            "us-iso-east-1": "US ISO East",
            "us-iso-west-1": "US ISO WEST",
        },
    },
    {
        "id": "aws-iso-b",
        "name": "AWS ISOB (US)",
        "dns_suffix": "sc2s.sgov.gov",
        "region_regex": r"^us\-isob\-\w+\-\d+$",
        "regions": {
            "aws-iso-b-global": "AWS ISOB (US) global region",
            "us-isob-east-1": "US ISOB East (Ohio)",
        },
    },
    {
        "id": "aws-iso-e",
        "name": "AWS ISOE (Europe)",
        "dns_suffix": "cloud.adc-e.uk",
        "region_regex": r"^eu\-isoe\-\w+\-\d+$",
        "regions": {
            "aws-iso-e-global": "AWS ISOE (Europe) global region",
            "eu-isoe-west-1": "EU ISOE West",
        },
    },
    {
        "id": "aws-iso-f",
        "name": "AWS ISOF",
        "dns_suffix": "csp.hci.ic.gov",
        "region_regex": r"^us\-isof\-\w+\-\d+$",
        "regions": {
            "aws-iso-f-global": "AWS ISOF global region",
            "us-isof-east-1": "US ISOF EAST",
            "us-isof-south-1": "US ISOF SOUTH",
        },
    },
    {
        "id": "aws-eusc",
        "name": "AWS EUSC",
        "dns_suffix": "amazonaws.eu",
        "region_regex": r"^eusc\-(de)\-\w+\-\d+$",
        "regions": {
            "eusc-de-east-1": "EU (Germany)",
        },
    },
]
