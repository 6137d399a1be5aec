"""Shared test fixtures for gorge."""

from collections.abc import Iterator
from datetime import datetime

import pytest
from sqlalchemy import Column, DateTime, Float, Integer, MetaData, String, Table, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

QUEUE_INFO_XML = """<?xml version='1.0'?>
<job_info  xmlns:xsd="http://gridengine.sunsource.net/source/browse/*checkout*/gridengine/source/dist/util/resources/schemas/qstat/qstat.xsd?revision=1.11">
  <queue_info>
    <job_list state="running">
      <JB_job_number>3064076</JB_job_number>
      <JAT_prio>0.67712</JAT_prio>
      <JAT_ntix>1.00000</JAT_ntix>
      <JB_nurg>0.00064</JB_nurg>
      <JB_urg>527</JB_urg>
      <JB_rrcontr>512</JB_rrcontr>
      <JB_wtcontr>15</JB_wtcontr>
      <JB_dlcontr>0</JB_dlcontr>
      <JB_nppri>0.25586</JB_nppri>
      <JB_priority>-500</JB_priority>
      <JB_name>QRLOGIN</JB_name>
      <JB_owner>bob</JB_owner>
      <JB_project>some_project</JB_project>
      <JB_department>defaultdepartment</JB_department>
      <state>r</state>
      <JAT_start_time>2012-11-01T13:06:41</JAT_start_time>
      <cpu_usage>0.00000</cpu_usage>
      <mem_usage>0.00000</mem_usage>
      <io_usage>0.00000</io_usage>
      <tickets>666</tickets>
      <JB_override_tickets>0</JB_override_tickets>
      <JB_jobshare>0</JB_jobshare>
      <otickets>0</otickets>
      <ftickets>666</ftickets>
      <stickets>0</stickets>
      <JAT_share>0.16667</JAT_share>
      <queue_name>interactive.q@cluster</queue_name>
      <slots>1</slots>
    </job_list>
  </queue_info>
  <job_info>
    <job_list state="pending">
      <JB_job_number>3050948</JB_job_number>
      <JAT_prio>0.70234</JAT_prio>
      <JAT_ntix>1.00000</JAT_ntix>
      <JB_nurg>0.00064</JB_nurg>
      <JB_urg>527</JB_urg>
      <JB_rrcontr>512</JB_rrcontr>
      <JB_wtcontr>15</JB_wtcontr>
      <JB_dlcontr>0</JB_dlcontr>
      <JB_nppri>0.00000</JB_nppri>
      <JB_priority>-500</JB_priority>
      <JB_name>Something</JB_name>
      <JB_owner>john</JB_owner>
      <JB_project>some_other_project</JB_project>
      <JB_department>defaultdepartment</JB_department>
      <state>Eqw</state>
      <JB_submission_time>2012-10-28T09:47:07</JB_submission_time>
      <tickets>500</tickets>
      <JB_override_tickets>0</JB_override_tickets>
      <JB_jobshare>0</JB_jobshare>
      <otickets>0</otickets>
      <ftickets>500</ftickets>
      <stickets>0</stickets>
      <JAT_share>0.12500</JAT_share>
      <queue_name></queue_name>
      <slots>1</slots>
    </job_list>
    <job_list state="pending">
      <JB_job_number>3050950</JB_job_number>
      <JAT_prio>0.50000</JAT_prio>
      <JB_priority>0</JB_priority>
      <JB_name>array_sweep</JB_name>
      <JB_owner>alice</JB_owner>
      <state>hqw</state>
      <JB_submission_time>2012-10-29T10:00:00</JB_submission_time>
      <queue_name></queue_name>
      <slots>4</slots>
      <tasks>1-10:3,20-22</tasks>
    </job_list>
  </job_info>
</job_info>
"""

FULL_QUEUE_INFO_XML = """<?xml version='1.0'?>
<job_info  xmlns:xsd="http://gridengine.sunsource.net/source/browse/*checkout*/gridengine/source/dist/util/resources/schemas/qstat/qstat.xsd?revision=1.11">
  <queue_info>
    <Queue-List>
      <name>all.q@node01.local</name>
      <qtype>BIP</qtype>
      <slots_used>2</slots_used>
      <slots_resv>0</slots_resv>
      <slots_total>8</slots_total>
      <arch>lx-amd64</arch>
      <job_list state="running">
        <JB_job_number>101</JB_job_number>
        <JB_name>align</JB_name>
        <JB_owner>bob</JB_owner>
        <state>r</state>
        <slots>2</slots>
        <tasks>3</tasks>
      </job_list>
    </Queue-List>
    <Queue-List>
      <name>all.q@node02.local</name>
      <qtype>BIP</qtype>
      <slots_used>0</slots_used>
      <slots_resv>0</slots_resv>
      <slots_total>8</slots_total>
      <arch>lx-amd64</arch>
    </Queue-List>
  </queue_info>
  <job_info>
    <job_list state="pending">
      <JB_job_number>102</JB_job_number>
      <JB_name>merge</JB_name>
      <JB_owner>bob</JB_owner>
      <state>qw</state>
      <slots>1</slots>
    </job_list>
  </job_info>
</job_info>
"""

DETAILED_JOB_INFO_XML = """<?xml version='1.0'?>
<detailed_job_info  xmlns:xsd="http://gridengine.sunsource.net/source/browse/*checkout*/gridengine/source/dist/util/resources/schemas/qstat/detailed_job_info.xsd?revision=1.11">
  <djob_info>
    <element>
      <JB_job_number>3050950</JB_job_number>
      <JB_ar>0</JB_ar>
      <JB_exec_file>job_scripts/3050950</JB_exec_file>
      <JB_submission_time>1351504800</JB_submission_time>
      <JB_owner>alice</JB_owner>
      <JB_uid>1001</JB_uid>
      <JB_group>users</JB_group>
      <JB_gid>100</JB_gid>
      <JB_account>sge</JB_account>
      <JB_merge_stderr>false</JB_merge_stderr>
      <JB_mail_list>
        <element>
          <MR_user>alice</MR_user>
          <MR_host>example.org</MR_host>
        </element>
      </JB_mail_list>
      <JB_notify>false</JB_notify>
      <JB_job_name>array_sweep</JB_job_name>
      <JB_stdout_path_list>
        <path_list>
          <PN_path>logs/sweep.out</PN_path>
          <PN_host></PN_host>
          <PN_file_host></PN_file_host>
          <PN_file_staging>false</PN_file_staging>
        </path_list>
      </JB_stdout_path_list>
      <JB_stderr_path_list>
        <path_list>
          <PN_path>/scratch/alice/sweep.err</PN_path>
          <PN_file_staging>false</PN_file_staging>
        </path_list>
      </JB_stderr_path_list>
      <JB_jobshare>0</JB_jobshare>
      <JB_hard_resource_list>
        <qstat_l_requests>
          <CE_name>h_vmem</CE_name>
          <CE_valtype>5</CE_valtype>
          <CE_stringval>4G</CE_stringval>
          <CE_doubleval>4294967296.000000</CE_doubleval>
          <CE_relop>0</CE_relop>
          <CE_consumable>1</CE_consumable>
          <CE_dominant>0</CE_dominant>
          <CE_pj_doubleval>0.000000</CE_pj_doubleval>
          <CE_pj_dominant>0</CE_pj_dominant>
          <CE_requestable>0</CE_requestable>
          <CE_tagged>0</CE_tagged>
        </qstat_l_requests>
      </JB_hard_resource_list>
      <JB_env_list>
        <job_sublist>
          <VA_variable>__SGE_PREFIX__O_HOME</VA_variable>
          <VA_value>/home/alice</VA_value>
        </job_sublist>
      </JB_env_list>
      <JB_job_args>
        <element>
          <ST_name>--input</ST_name>
        </element>
        <element>
          <ST_name>data.csv</ST_name>
        </element>
      </JB_job_args>
      <JB_script_file>sweep.sh</JB_script_file>
      <JB_ja_tasks>
        <ulong_sublist>
          <JAT_status>128</JAT_status>
          <JAT_task_number>1</JAT_task_number>
          <JAT_message_list>
            <ulong_sublist>
              <QIM_type>1</QIM_type>
              <QIM_message>queue full</QIM_message>
            </ulong_sublist>
          </JAT_message_list>
        </ulong_sublist>
        <ulong_sublist>
          <JAT_status>128</JAT_status>
          <JAT_task_number>4</JAT_task_number>
        </ulong_sublist>
      </JB_ja_tasks>
      <JB_cwd>/home/alice/project</JB_cwd>
      <JB_jid_successor_list>
        <ulong_sublist>
          <JRE_job_number>3050951</JRE_job_number>
        </ulong_sublist>
      </JB_jid_successor_list>
      <JB_deadline>0</JB_deadline>
      <JB_execution_time>0</JB_execution_time>
      <JB_checkpoint_attr>0</JB_checkpoint_attr>
      <JB_checkpoint_interval>0</JB_checkpoint_interval>
      <JB_reserve>false</JB_reserve>
      <JB_mail_options>0</JB_mail_options>
      <JB_priority>1024</JB_priority>
      <JB_restart>0</JB_restart>
      <JB_verify>false</JB_verify>
      <JB_script_size>0</JB_script_size>
      <JB_verify_suitable_queues>0</JB_verify_suitable_queues>
      <JB_soft_wallclock_gmt>0</JB_soft_wallclock_gmt>
      <JB_hard_wallclock_gmt>0</JB_hard_wallclock_gmt>
      <JB_override_tickets>0</JB_override_tickets>
      <JB_version>0</JB_version>
      <JB_ja_structure>
        <task_id_range>
          <RN_min>1</RN_min>
          <RN_max>10</RN_max>
          <RN_step>3</RN_step>
        </task_id_range>
      </JB_ja_structure>
      <JB_type>8</JB_type>
    </element>
  </djob_info>
  <messages>
    <element>
      <SME_message_list>
        <element>
          <MES_job_number_list>
            <ulong_sublist>
              <ULNG_value>3050950</ULNG_value>
            </ulong_sublist>
          </MES_job_number_list>
          <MES_message_number>33</MES_message_number>
          <MES_message>job is not allowed to run in any queue</MES_message>
        </element>
      </SME_message_list>
    </element>
  </messages>
</detailed_job_info>
"""

UNKNOWN_JOB_XML = """<?xml version='1.0'?>
<unknown_jobs  xmlns:xsd="http://gridengine.sunsource.net/source/browse/*checkout*/gridengine/source/dist/util/resources/schemas/qstat/detailed_job_info.xsd?revision=1.11">
   <>
     <ST_name>9999999</ST_name>
   </>
</unknown_jobs>
"""


@pytest.fixture
def queue_info_xml() -> str:
    """Sample ``qstat -xml -pri -ext -urg -u '*'`` output."""
    return QUEUE_INFO_XML


@pytest.fixture
def full_queue_info_xml() -> str:
    """Sample ``qstat -xml -f`` output."""
    return FULL_QUEUE_INFO_XML


@pytest.fixture
def detailed_job_info_xml() -> str:
    """Sample ``qstat -xml -j`` output for an array job."""
    return DETAILED_JOB_INFO_XML


@pytest.fixture
def unknown_job_xml() -> str:
    """``qstat -xml -j`` output for a job that does not exist."""
    return UNKNOWN_JOB_XML


@pytest.fixture
def valid_usernames() -> list[str]:
    """List of valid usernames for testing."""
    return ["testuser", "test_user", "test.user", "test-user", "user123"]


@pytest.fixture
def invalid_usernames() -> list[str]:
    """List of invalid usernames for testing."""
    return ["test user", "test@user", "test;user", "test'user", ""]


@pytest.fixture
def arco_engine() -> Iterator[Engine]:
    """In-memory database with the ARCo tables and views used by gorge."""
    engine = create_engine("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    metadata = MetaData()

    sge_job = Table(
        "sge_job",
        metadata,
        Column("j_job_number", Integer),
        Column("j_task_number", Integer),
        Column("j_pe_taskid", String),
        Column("j_job_name", String),
        Column("j_group", String),
        Column("j_owner", String),
        Column("j_account", String),
        Column("j_priority", Integer),
        Column("j_submission_time", DateTime),
        Column("j_project", String),
        Column("j_department", String),
    )
    view_accounting = Table(
        "view_accounting",
        metadata,
        Column("job_number", Integer),
        Column("task_number", Integer),
        Column("pe_taskid", String),
        Column("name", String),
        Column("group", String),
        Column("username", String),
        Column("account", String),
        Column("project", String),
        Column("department", String),
        Column("submission_time", DateTime),
        Column("ar_parent", Integer),
        Column("start_time", DateTime),
        Column("end_time", DateTime),
        Column("wallclock_time", Integer),
        Column("cpu", Float),
        Column("mem", Float),
        Column("io", Float),
        Column("iow", Float),
        Column("maxvmem", Float),
        Column("exit_status", Integer),
        Column("maxrss", Integer),
    )
    view_job_log = Table(
        "view_job_log_ordered",
        metadata,
        Column("job_number", Integer),
        Column("task_number", Integer),
        Column("pe_taskid", String),
        Column("name", String),
        Column("user", String),
        Column("account", String),
        Column("project", String),
        Column("department", String),
        Column("time", DateTime),
        Column("event", String),
        Column("state", String),
        Column("initiator", String),
        Column("host", String),
        Column("message", String),
    )
    metadata.create_all(engine)

    submitted = datetime(2012, 10, 29, 10, 0, 0)

    def accounting_row(task: int, start_hour: int, exit_status: int = 0) -> dict[str, object]:
        return {
            "job_number": 3050950,
            "task_number": task,
            "pe_taskid": None,
            "name": "array_sweep",
            "group": "users",
            "username": "alice",
            "account": "sge",
            "project": "sweeps",
            "department": "defaultdepartment",
            "submission_time": submitted,
            "ar_parent": 0,
            "start_time": datetime(2012, 10, 29, start_hour, 0, 0),
            "end_time": datetime(2012, 10, 29, start_hour + 1, 0, 0),
            "wallclock_time": 3600,
            "cpu": 3500.5,
            "mem": 120.25,
            "io": 1.5,
            "iow": 0.0,
            "maxvmem": 2147483648.0,
            "exit_status": exit_status,
            "maxrss": 1048576,
        }

    with engine.begin() as conn:
        conn.execute(
            sge_job.insert(),
            [
                {
                    "j_job_number": 3050950,
                    "j_task_number": -1,
                    "j_pe_taskid": None,
                    "j_job_name": "array_sweep",
                    "j_group": "users",
                    "j_owner": "alice",
                    "j_account": "sge",
                    "j_priority": 0,
                    "j_submission_time": submitted,
                    "j_project": "sweeps",
                    "j_department": "defaultdepartment",
                },
                {
                    "j_job_number": 3050950,
                    "j_task_number": 4,
                    "j_pe_taskid": None,
                    "j_job_name": "array_sweep",
                    "j_group": "users",
                    "j_owner": "alice",
                    "j_account": "sge",
                    "j_priority": 0,
                    "j_submission_time": submitted,
                    "j_project": "sweeps",
                    "j_department": "defaultdepartment",
                },
            ],
        )
        conn.execute(
            view_accounting.insert(),
            [accounting_row(4, 14, exit_status=1), accounting_row(1, 11), accounting_row(7, 17)],
        )
        conn.execute(
            view_job_log.insert(),
            [
                {
                    "job_number": 3050950,
                    "task_number": -1,
                    "pe_taskid": None,
                    "name": "array_sweep",
                    "user": "alice",
                    "account": "sge",
                    "project": "sweeps",
                    "department": "defaultdepartment",
                    "time": submitted,
                    "event": "pending",
                    "state": "qw",
                    "initiator": "alice",
                    "host": "login01",
                    "message": "new job",
                },
                {
                    "job_number": 3050950,
                    "task_number": 1,
                    "pe_taskid": None,
                    "name": "array_sweep",
                    "user": "alice",
                    "account": "sge",
                    "project": "sweeps",
                    "department": "defaultdepartment",
                    "time": datetime(2012, 10, 29, 11, 0, 0),
                    "event": "delivered",
                    "state": "r",
                    "initiator": "master",
                    "host": "node01",
                    "message": "job sent to execd",
                },
            ],
        )

    yield engine
    engine.dispose()
