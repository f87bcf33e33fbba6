"""Taskminder -- 任务生命周期服务 + 到期提醒管道"""
