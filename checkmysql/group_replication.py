#
# InnoGames Monitoring Plugins - check_mysql Group Replication
#
# Copyright (c) 2026, InnoGames GmbH
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.  IN NO EVENT SHALL
# THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
# THE SOFTWARE.
#

"""Health of a MySQL Group Replication member

The state of the local member decides the result.  When asked to, the
other members are inspected too: any of them being neither ONLINE nor
RECOVERING turns an OK into a WARNING and is listed in the message.
Peers never make the result CRITICAL; only the local member can.
"""

import collections
import logging
from enum import Enum
from typing import List, Sequence

from checkmysql.common import CheckResult, Severity, most_severe, unknown
from checkmysql.source import IdentityResolutionError, MetricSourceError

logger = logging.getLogger(__name__)

LOCAL_MEMBER_STATE_QUERY = '''
    SELECT MEMBER_STATE
    FROM performance_schema.replication_group_members
    WHERE MEMBER_HOST = %s AND MEMBER_PORT = %s
'''

ANOMALOUS_MEMBERS_QUERY = '''
    SELECT MEMBER_HOST, MEMBER_PORT, MEMBER_STATE
    FROM performance_schema.replication_group_members
    WHERE MEMBER_STATE NOT IN ('ONLINE', 'RECOVERING')
        AND NOT (MEMBER_HOST = %s AND MEMBER_PORT = %s)
    ORDER BY MEMBER_HOST
'''


class MemberState(Enum):
    ONLINE = 'ONLINE'
    RECOVERING = 'RECOVERING'
    OFFLINE = 'OFFLINE'
    ERROR = 'ERROR'
    UNREACHABLE = 'UNREACHABLE'
    # Anything the server may report that we don't know about
    UNRECOGNIZED = None

    @classmethod
    def parse(cls, state: str) -> 'MemberState':
        try:
            return cls(state)
        except ValueError:
            return cls.UNRECOGNIZED


GroupMember = collections.namedtuple('GroupMember', ['host', 'port', 'state'])

_STATE_SEVERITIES = {
    MemberState.ONLINE: Severity.OK,
    MemberState.RECOVERING: Severity.WARNING,
}


def classify(state: MemberState) -> Severity:
    """Map a member state to a severity, unexpected ones being CRITICAL"""
    return _STATE_SEVERITIES.get(state, Severity.CRITICAL)


def aggregate(
    local_state: str,
    include_peers: bool,
    peers: Sequence[GroupMember] = (),
) -> CheckResult:
    severity = classify(MemberState.parse(local_state))
    if not include_peers or not peers:
        return CheckResult(severity, local_state)

    severity = most_severe(severity, Severity.WARNING)
    message = '{}. Anomalies were detected in other group members: {}'.format(
        local_state,
        ', '.join('{}:{} {}'.format(*member) for member in peers),
    )
    return CheckResult(severity, message)


def get_local_member_state(source, local_hostname: str, local_port: str) -> str:
    rows = source.query(LOCAL_MEMBER_STATE_QUERY, (local_hostname, local_port))
    if not rows:
        raise IdentityResolutionError(
            '{}:{} is not a group member'.format(local_hostname, local_port)
        )
    return rows[0]['MEMBER_STATE']


def get_anomalous_members(
    source, local_hostname: str, local_port: str
) -> List[GroupMember]:
    rows = source.query(ANOMALOUS_MEMBERS_QUERY, (local_hostname, local_port))
    return [
        GroupMember(r['MEMBER_HOST'], str(r['MEMBER_PORT']), r['MEMBER_STATE'])
        for r in rows
    ]


def check_group_replication(
    source, local_hostname: str, local_port: str, include_peers: bool
) -> CheckResult:
    try:
        local_state = get_local_member_state(source, local_hostname, local_port)
        logger.info('Local member state is {}'.format(local_state))
        peers = []
        if include_peers:
            peers = get_anomalous_members(source, local_hostname, local_port)
            logger.info('Anomalous members are: {}'.format(peers))
    except MetricSourceError as e:
        return unknown(str(e))

    return aggregate(local_state, include_peers, peers)
