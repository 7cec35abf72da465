"""
Built-in compliance standards.

Defined once at import time. Any malformed pattern or rule here fails the
import, before a single document is evaluated.
"""

import re

from logaudit.rule_engine.schemas import (
    CompletionRule,
    CompoundRule,
    ConditionalPresenceRule,
    CountRule,
    PresenceRule,
    SequenceRule,
    Severity,
    Standard,
    StandardKind,
    TagTimestampRule,
)

GENERAL_STANDARD_ID = "general"
BITTORRENT_STANDARD_ID = "bittorrent"
XML_TDR_STANDARD_ID = "xml-tdr"
SECURITY_STANDARD_ID = "security"
AI_STANDARD_ID = "ai"

_I = re.IGNORECASE

GENERAL_LOG_STANDARD = Standard(
    id=GENERAL_STANDARD_ID,
    name="General Purpose Log",
    description="Analyze generic application logs for startup, shutdown, and error messages.",
    rules=(
        PresenceRule(
            id="startup-initiated",
            description="Log must contain a system startup sequence initiation message.",
            pattern=re.compile(r"System startup sequence initiated", _I),
        ),
        PresenceRule(
            id="license-check",
            description="A valid license check must be present in the log.",
            pattern=re.compile(r"License check: VALID", _I),
        ),
        PresenceRule(
            id="services-started",
            description="Log must indicate that all services started successfully.",
            pattern=re.compile(r"All services started successfully", _I),
        ),
        PresenceRule(
            id="no-errors",
            description='Log must not contain any "ERROR:" level messages.',
            pattern=re.compile(r"^ERROR:", _I | re.MULTILINE),
            expect_present=False,
        ),
        PresenceRule(
            id="no-fatal-errors",
            description='Log must not contain any "FATAL:" level messages.',
            pattern=re.compile(r"FATAL:", _I),
            expect_present=False,
        ),
        PresenceRule(
            id="shutdown-complete",
            description="Log must contain a clean shutdown completion message.",
            pattern=re.compile(r"Shutdown sequence complete", _I),
        ),
    ),
)

BITTORRENT_LOG_STANDARD = Standard(
    id=BITTORRENT_STANDARD_ID,
    name="BitTorrent Client Log",
    description="Analyze a BitTorrent client log against common BEP compliance points.",
    rules=(
        PresenceRule(
            id="bep-03-handshake",
            description="Must show successful peer handshakes.",
            pattern=re.compile(
                r"(?:Handshake with peer [a-fA-F0-9:.]+ successful"
                r"|Successfully exchanged handshakes)",
                _I,
            ),
        ),
        CompletionRule(
            id="download-complete",
            description=(
                "The connected remote peer must be a full seed. This check fails if "
                "the remote client explicitly reports possessing fewer pieces than "
                "the total required."
            ),
            peer_progress_pattern=re.compile(
                r"Remote client acknowledges that it has piece: .*?"
                r"\(possesses (\d+) of (\d+) pieces\)",
                _I,
            ),
        ),
        PresenceRule(
            id="bep-15-tracker-announce",
            description=(
                "Should show successful tracker announce requests. Absence may "
                "indicate a DHT-only session."
            ),
            pattern=re.compile(r"Tracker announce successful", _I),
            severity=Severity.WARNING,
        ),
        PresenceRule(
            id="bep-05-dht-bootstrap",
            description=(
                "Should show successful DHT bootstrap. Absence may indicate a "
                "tracker-only session."
            ),
            pattern=re.compile(
                r"(?:DHT bootstrap successful|DHT node is now bootstrapped"
                r"|DHT bootstrap complete)",
                _I,
            ),
            severity=Severity.WARNING,
        ),
        CompoundRule(
            id="critical-connection-established",
            description=(
                "Client must establish a connection via Tracker OR DHT. Log "
                "indicates failure for both methods."
            ),
            depends_on_rule_ids=("bep-15-tracker-announce", "bep-05-dht-bootstrap"),
        ),
        PresenceRule(
            id="uninitialized-file-creation",
            description=(
                "Logs show creation of uninitialized files. This is normal behavior "
                "for pre-allocating storage space."
            ),
            pattern=re.compile(r"Created uninitialized file for index", _I),
        ),
        PresenceRule(
            id="error-peer-connection",
            description="Log must not contain peer connection errors.",
            pattern=re.compile(r"Failed to connect to peer", _I),
            expect_present=False,
        ),
        PresenceRule(
            id="error-tracker-timeout",
            description=(
                "Log should not contain tracker timeout errors. These indicate "
                "network issues or tracker unavailability when a tracker is in use."
            ),
            pattern=re.compile(r"Tracker request timed out", _I),
            expect_present=False,
            severity=Severity.WARNING,
        ),
    ),
)

SECURITY_ANOMALY_STANDARD = Standard(
    id=SECURITY_STANDARD_ID,
    name="Security & Anomaly Detection",
    description="Analyzes logs for patterns suggesting protocol manipulation or malicious activity.",
    rules=(
        CountRule(
            id="excessive-piece-requests",
            description=(
                "Checks for an abnormally high number of piece requests by summing "
                "requests from log lines. High totals can indicate a denial-of-service "
                "or buffer overrun attempt."
            ),
            # "Sent 16 requests for data" / "Sent 1 piece request..."
            pattern=re.compile(r"Sent (\d+) (?:piece request|requests for data)", _I),
            max_occurrences=10000,
            sum_capture_group_index=1,
        ),
        CountRule(
            id="rapid-peer-churn",
            description=(
                "Monitors for rapid connection/disconnection cycles with peers, a "
                "potential sign of network scanning or protocol abuse."
            ),
            pattern=re.compile(r"peer session (started|ended)", _I),
            max_occurrences=100,
        ),
        PresenceRule(
            id="malformed-message",
            description=(
                "Detects logs of malformed or unexpected messages received from "
                "peers, which can be an attack vector."
            ),
            pattern=re.compile(r"malformed message received", _I),
            expect_present=False,
        ),
        CountRule(
            id="choke-unchoke-spam",
            description=(
                "Flags excessive choke/unchoke state changes, which could be used to "
                "disrupt download/upload performance."
            ),
            pattern=re.compile(r"Received (a|an) (un)?choke message", _I),
            max_occurrences=200,
        ),
        SequenceRule(
            id="suspicious-state-cycling",
            description=(
                "Detects rapid interested/not-interested cycles, which can indicate "
                "an inefficient client or a protocol manipulation attack."
            ),
            steps=(
                re.compile(r"Sent a not interested message", _I),
                re.compile(r"Sent an interested message", _I),
                re.compile(r"Sent \d+ requests for data", _I),
            ),
            max_time_gap_seconds=5,
            max_occurrences=50,
        ),
    ),
)

XML_TDR_STANDARD = Standard(
    id=XML_TDR_STANDARD_ID,
    name="XML TDR Report",
    description="Analyzes a Torrent Data Record (TDR) XML file for correctness and completeness.",
    rules=(
        TagTimestampRule(
            id="xml-timestamps-valid",
            description="Validates the presence of start/end timestamps and calculates the duration.",
            start_tag="started",
            end_tag="ended",
        ),
        PresenceRule(
            id="xml-netstat-enabled",
            description="The 'netstat' option must be enabled (`<netstat>true</netstat>`).",
            pattern=re.compile(r"<netstat>true</netstat>", _I),
        ),
        PresenceRule(
            id="xml-foi-enabled",
            description="The 'File of Interest' (foi) option must be enabled (`<foi>true</foi>`).",
            pattern=re.compile(r"<foi>true</foi>", _I),
        ),
        ConditionalPresenceRule(
            id="xml-all-files-are-foi",
            description=(
                "If the FOI option is enabled, all described files must also be "
                "classified as FOI. This check fails if any file is explicitly "
                "marked otherwise."
            ),
            condition_pattern=re.compile(r"<foi>true</foi>", _I),
            target_pattern=re.compile(
                r"<file>.*?\((?:not a FOI|FOI-false)\).*?</file>", _I
            ),
            expect_present=False,
        ),
        PresenceRule(
            id="xml-location-uncertainty",
            description="Location data must include area or uncertainty values for accuracy.",
            pattern=re.compile(
                r"<location>[\s\S]*?(?:<area>|<uncertainty>)[\s\S]*?</location>", _I
            ),
        ),
    ),
)

AI_SUMMARY_STANDARD = Standard(
    id=AI_STANDARD_ID,
    name="AI-Powered Analysis",
    description=(
        "Use a generative model for an open-ended analysis of errors, warnings, "
        "and incomplete transactions."
    ),
    kind=StandardKind.SUMMARY,
)

AVAILABLE_STANDARDS = (
    GENERAL_LOG_STANDARD,
    BITTORRENT_LOG_STANDARD,
    XML_TDR_STANDARD,
    SECURITY_ANOMALY_STANDARD,
    AI_SUMMARY_STANDARD,
)

# Which standards a file-set's documents are checked against
DETAILS_STANDARD_IDS = (
    GENERAL_STANDARD_ID,
    BITTORRENT_STANDARD_ID,
    SECURITY_STANDARD_ID,
    AI_STANDARD_ID,
)
XML_STANDARD_IDS = (XML_TDR_STANDARD_ID,)
