# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""Response contract for EC2 DescribeRouteTables.

Only the fields used by route synchronization are declared; everything else in the response is ignored.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from routesync.core.route_tables import Route, RouteTable, RouteTableAssociation


class _EC2Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class RouteModel(_EC2Model):
    destination_cidr_block: Optional[str] = Field(None, alias="DestinationCidrBlock")
    network_interface_id: Optional[str] = Field(None, alias="NetworkInterfaceId")
    state: Optional[str] = Field(None, alias="State")
    origin: Optional[str] = Field(None, alias="Origin")

    def to_route(self) -> Route:
        return Route(self.destination_cidr_block, self.state, self.origin, self.network_interface_id)


class RouteTableAssociationModel(_EC2Model):
    main: bool = Field(False, alias="Main")
    route_table_association_id: Optional[str] = Field(None, alias="RouteTableAssociationId")
    subnet_id: Optional[str] = Field(None, alias="SubnetId")

    def to_association(self) -> RouteTableAssociation:
        return RouteTableAssociation(self.main, self.route_table_association_id, self.subnet_id)


class RouteTableModel(_EC2Model):
    route_table_id: str = Field(..., alias="RouteTableId")
    vpc_id: Optional[str] = Field(None, alias="VpcId")
    associations: List[RouteTableAssociationModel] = Field(default_factory=list, alias="Associations")
    routes: List[RouteModel] = Field(default_factory=list, alias="Routes")

    def to_route_table(self) -> RouteTable:
        return RouteTable(
            self.route_table_id,
            [association.to_association() for association in self.associations],
            [route.to_route() for route in self.routes],
            self.vpc_id,
        )


class DescribeRouteTablesResponse(_EC2Model):
    route_tables: List[RouteTableModel] = Field(..., alias="RouteTables")
    next_token: Optional[str] = Field(None, alias="NextToken")
